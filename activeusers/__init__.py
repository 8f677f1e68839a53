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

"""Active User Counts from Redis Bitmaps.

Something else (your application) sets a bit in Redis every time a user does
something of interest:

    SETBIT <action>-<YYYY-MM-DD> <user-number> 1

This package reads those bitmaps back and reports daily, weekly and monthly
active users. It is in several parts:

 * dates:       UTC calendar arithmetic
 * keys:        the mapping from actions and dates to Redis keys
 * bits:        bitmaps as (arbitrarily wide) integers
 * aggregate:   fetching bitmaps in parallel and combining them
 * store:       Redis and RKVDNS stores
 * reporter:    the reports themselves

Weeks and months are the bitwise OR of the daily bitmaps, so a user active on
several days is still counted once. Nothing is ever written to the store.
"""

from .errors import ActiveUsersError, InputError, CalendarError, StoreError
from .keys import key_for, week_keys, month_keys, range_keys, DEFAULT_ACTION
from .bits import normalize, cardinality, BitSet
from .aggregate import aggregate, enumerate_users, UsersList
from .store import RedisStore, RkvdnsStore
from .reporter import Options, Reporter, create_client
