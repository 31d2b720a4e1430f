from .models import HolidayRecord, HolidayType
from .query import NoHolidayDataError, QueryEngine, next_holidays

__version__ = "0.1.0"

__all__ = ["HolidayRecord", "HolidayType", "NoHolidayDataError", "QueryEngine", "next_holidays"]
