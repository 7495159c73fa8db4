from fastapi import Depends, Query

from app.config import Settings, get_settings


class Page:
    def __init__(self, start: int, count: int):
        self.start = start
        self.count = count


def page_params(
    start: int = Query(default=0),
    count: int = Query(default=0),
    settings: Settings = Depends(get_settings),
) -> Page:
    # out-of-range values fall back rather than fail
    if count < 1:
        count = settings.default_page_size
    if start < 0:
        start = 0
    return Page(start, count)
