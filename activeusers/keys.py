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

"""Storage Keys.

There is one key per action per day:

    <action>-<YYYY-MM-DD>

for example:

    active-2024-01-01
    login-2024-01-01

The value stored at each key is a bitmap where bit N (counting from the most
significant bit of the first byte, the way Redis SETBIT counts) is set if user
N performed the action on that day.

Weeks and months are not stored, they are always assembled from the daily keys.
"""

from datetime import timedelta

from .errors import InputError, CalendarError
from . import dates

DEFAULT_ACTION = 'active'
DELIMITER = '-'

DAY = 'D'
WEEK = 'W'
MONTH = 'M'
GRANULARITIES = { DAY, WEEK, MONTH }

# Length of the YYYY-MM-DD suffix.
DATE_LENGTH = 10

def key_for(action=None, date=None):
    """Return the key for an action on a single day.

    If the date is omitted then today (UTC) is used.
    """
    return DELIMITER.join(( action or DEFAULT_ACTION, dates.format_iso_date(date) ))

def days_keys(first, n, action=None):
    return [ key_for(action, first + timedelta(days=i)) for i in range(n) ]

def week_keys(date, action=None):
    """The 7 keys for the week containing date, in chronological order."""
    return days_keys(dates.start_of_week(date), 7, action)

def month_keys(date, action=None):
    """One key for every day of the month containing date, in chronological order."""
    return days_keys(dates.start_of_month(date), dates.days_in_month(date), action)

def range_keys(granularity, date=None, action=None):
    """Keys for a granularity of D(ay), W(eek) or M(onth)."""
    if granularity == DAY:
        return [ key_for(action, date) ]
    if granularity == WEEK:
        return week_keys(date, action)
    if granularity == MONTH:
        return month_keys(date, action)
    raise InputError('Invalid granularity "{}", expected one of: {}'.format(
                        granularity, ', '.join(sorted(GRANULARITIES))
                    ))

def key_date(key):
    """Parse the date back out of a key.

    Only the rightmost part is looked at, so actions are free to contain the
    delimiter.
    """
    suffix = key[-DATE_LENGTH:]
    if len(key) <= DATE_LENGTH or key[-DATE_LENGTH-1] != DELIMITER:
        raise CalendarError('No date in key "{}"'.format(key))
    return dates.parse_date(suffix)
