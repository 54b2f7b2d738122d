from roomtable.models.schedule_entry import ScheduleEntryRecord  # noqa: F401
