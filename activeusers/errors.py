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

"""Exceptions.

There are three kinds of errors which can be expected:

    Input Errors
    ------------
    InputError          A bad granularity or an empty key sequence.
    CalendarError       A date which can't be resolved. This is a subclass
                        of InputError.

    Run Time
    --------
    StoreError          The store (Redis, RKVDNS) failed. Raised by the store
                        adapters; the engine itself never catches these.

InputError is also a ValueError, so callers which don't care about the
distinction can catch that.
"""

class ActiveUsersError(Exception):
    pass

class InputError(ActiveUsersError, ValueError):
    pass

class CalendarError(InputError):
    pass

class StoreError(ActiveUsersError):
    pass
