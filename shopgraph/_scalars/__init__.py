from .date_time import DateTime
