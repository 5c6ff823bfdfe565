from abc import ABC, abstractmethod


class ResultsLayout(ABC):
    """Named-field XPath locators for one results page layout.

    Row and tier indexes are 1-based, matching XPath positional predicates.
    """
    search_button: str
    row_containers: str

    @abstractmethod
    def flight_numbers(self, row: int) -> str: ...

    @abstractmethod
    def num_stops(self, row: int) -> str: ...

    @abstractmethod
    def plane_change(self, row: int) -> str: ...

    @abstractmethod
    def departure_time(self, row: int) -> tuple[str, str]:
        """(clock, meridiem) locators."""

    @abstractmethod
    def arrival_time(self, row: int) -> tuple[str, str]: ...

    @abstractmethod
    def duration(self, row: int) -> str: ...

    @abstractmethod
    def price(self, row: int, tier: int) -> str: ...

    @abstractmethod
    def seats_left(self, row: int, tier: int) -> str: ...


class SouthwestLayout(ResultsLayout):
    search_button = '//*[@id="form-mixin--submit-button"]'
    row_containers = "//*[contains(concat(' ', normalize-space(@class), ' '), ' air-booking-select-detail ')]"

    def __init__(self, product: int = 0):
        self.product = product
        self._row = f'//*[@id="air-booking-product-{product}"]/div[6]/span/span/ul/li[{{row}}]'
        self._fare = f'//*[@id="air-booking-fares-{product}-{{row}}"]/div[{{tier}}]/button/span/span/span'

    def flight_numbers(self, row: int) -> str:
        return self._row.format(row=row) + "/div[1]/div/div/button/span[1]"

    def num_stops(self, row: int) -> str:
        return self._row.format(row=row) + "/div[4]/div/button/span[1]/div"

    def plane_change(self, row: int) -> str:
        return self._row.format(row=row) + "/div[4]/div[2]"

    def departure_time(self, row: int) -> tuple[str, str]:
        base = self._row.format(row=row) + "/div[2]/span"
        return base + "/text()", base + "/span[2]"

    def arrival_time(self, row: int) -> tuple[str, str]:
        base = self._row.format(row=row) + "/div[3]/span"
        return base + "/text()", base + "/span[2]"

    def duration(self, row: int) -> str:
        return self._row.format(row=row) + "/div[5]"

    def price(self, row: int, tier: int) -> str:
        return self._fare.format(row=row, tier=tier) + "/span/span[2]/span[2]"

    def seats_left(self, row: int, tier: int) -> str:
        return self._fare.format(row=row, tier=tier) + "/div/span"
