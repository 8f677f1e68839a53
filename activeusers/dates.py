#!/usr/bin/python3
# Copyright (c) 2024 by Fred Morris Tacoma WA
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Calendar arithmetic, always in UTC and always in whole days.

Everything downstream of to_date() deals exclusively in datetime.date objects;
strings, datetimes and None are all normalized here.
"""

from datetime import date, datetime, timedelta, timezone
from calendar import monthrange

from .errors import CalendarError

ISO_DATE_FORMAT = '%Y-%m-%d'

# Weekday numbers as used by date.weekday(). The week starts on Sunday.
MONDAY = 0
SUNDAY = 6
WEEK_START = SUNDAY

def utc_now():
    """Today, in UTC."""
    return datetime.now(timezone.utc).date()

def parse_date(value):
    """Parse a YYYY-MM-DD string or an ISO 8601 datetime string."""
    value = value.strip()
    try:
        return datetime.strptime(value, ISO_DATE_FORMAT).date()
    except ValueError:
        pass
    try:
        # fromisoformat() doesn't accept a trailing "Z" before 3.11.
        if value.endswith(('Z', 'z')):
            value = value[:-1] + '+00:00'
        return to_date(datetime.fromisoformat(value))
    except ValueError:
        raise CalendarError('Unparseable date: "{}"'.format(value))

def to_date(value=None):
    """Normalize whatever we were handed to a UTC date.

    Accepts:

        None        Today (UTC).
        date        Used as is.
        datetime    Aware datetimes are converted to UTC, naive ones are
                    assumed to be UTC already. The time of day is dropped.
        str         See parse_date().
    """
    if value is None:
        return utc_now()
    # datetime is a subclass of date, so it has to be tested first.
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return parse_date(value)
    raise CalendarError('Unsupported date type: {}'.format(type(value).__name__))

def start_of_week(day, week_start=WEEK_START):
    day = to_date(day)
    return day - timedelta(days=(day.weekday() - week_start) % 7)

def start_of_month(day):
    return to_date(day).replace(day=1)

def days_in_month(day):
    day = to_date(day)
    return monthrange(day.year, day.month)[1]

def format_iso_date(day):
    return to_date(day).isoformat()
