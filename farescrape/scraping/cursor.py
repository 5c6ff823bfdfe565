import logging
import random

from playwright.sync_api import ElementHandle, Page


class HumanCursor:
    """Moves the mouse along an eased, jittered path before clicking, like a person would.

    The cursor remembers where it last stopped so consecutive moves start from there.
    """

    def __init__(self, page: Page, rng: random.Random | None = None, steps: int = 25):
        self.page = page
        self.rng = rng or random.Random()
        self.steps = steps
        viewport = page.viewport_size or {"width": 1280, "height": 800}
        self.position = (
            self.rng.uniform(0, viewport["width"]),
            self.rng.uniform(0, viewport["height"]),
        )

    @staticmethod
    def _ease_in_out(t: float) -> float:
        return 4 * t ** 3 if t < 0.5 else 1 - (-2 * t + 2) ** 3 / 2

    def _target_point(self, box: dict[str, float], padding_percentage: float) -> tuple[float, float]:
        # padding shrinks the clickable area towards the element centre
        inner = max(0.0, min(padding_percentage, 100.0)) / 100
        x = box["x"] + box["width"] * inner / 2 + self.rng.uniform(0, box["width"] * (1 - inner))
        y = box["y"] + box["height"] * inner / 2 + self.rng.uniform(0, box["height"] * (1 - inner))
        return x, y

    def move_to(self, x: float, y: float) -> None:
        start_x, start_y = self.position
        for i in range(1, self.steps + 1):
            t = self._ease_in_out(i / self.steps)
            jitter = 0.0 if i == self.steps else self.rng.uniform(-2, 2)
            self.page.mouse.move(start_x + (x - start_x) * t + jitter, start_y + (y - start_y) * t + jitter)
        self.position = (x, y)

    def click(self, element: ElementHandle, wait_for_click: int = 2500, padding_percentage: float = 25) -> None:
        element.scroll_into_view_if_needed()
        box = element.bounding_box()
        if not box:
            logging.warning("Element has no bounding box, falling back to a plain click.")
            element.click()
            return
        x, y = self._target_point(box, padding_percentage)
        self.move_to(x, y)
        self.page.wait_for_timeout(wait_for_click)
        self.page.mouse.click(x, y, delay=self.rng.randint(40, 120))
        logging.debug("Clicked at (%.0f, %.0f)", x, y)
