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

"""Active User Reports.

    reporter = create_client('10.0.0.224')

    reporter.daily()                                    # today, "active"
    reporter.weekly(action='login')                     # this week
    reporter.monthly(date='2024-01-15')                 # January 2024
    reporter.get_users(granularity='D', date='2024-01-01')

Every report takes the same options, either as an Options instance or as
keyword arguments (or both, in which case the keyword arguments win):

    action      The tracked action. Defaults to "active".
    date        Any day in the period of interest. Defaults to today (UTC).
    granularity D(ay), W(eek) or M(onth). Only get_users() and count() look
                at it. Defaults to W.

Counts are of distinct users: somebody active on every day of the week is
counted once by weekly(). get_users() on the other hand lists them once for
every day they were active.
"""

from .aggregate import aggregate, enumerate_users
from .bits import cardinality
from .errors import InputError
from .store import RedisStore
from . import keys
from . import dates

class Options(object):
    """Options for a report."""

    FIELDS = ('action', 'date', 'granularity')

    def __init__(self, action=None, date=None, granularity=keys.WEEK):
        if granularity is None:
            granularity = keys.WEEK
        if granularity not in keys.GRANULARITIES:
            raise InputError('Invalid granularity "{}", expected one of: {}'.format(
                                granularity, ', '.join(sorted(keys.GRANULARITIES))
                            ))
        self.action = action or keys.DEFAULT_ACTION
        self.date = dates.to_date(date)
        self.granularity = granularity
        return

    def __repr__(self):
        return '<{} {}>'.format(type(self).__name__,
                                ' '.join('{}={}'.format(k, getattr(self, k)) for k in self.FIELDS)
                            )

    @classmethod
    def coerce(cls, options=None, **kwargs):
        """Build Options from an existing instance and / or keyword arguments."""
        for k in kwargs:
            if k not in cls.FIELDS:
                raise TypeError('Unexpected option "{}"'.format(k))
        if options is None:
            return cls(**kwargs)
        if not isinstance(options, cls):
            raise TypeError('Expected {}, not {}'.format(cls.__name__, type(options).__name__))
        if not kwargs:
            return options
        merged = { k:getattr(options, k) for k in cls.FIELDS }
        merged.update(kwargs)
        return cls(**merged)

class Reporter(object):
    """Reports on active users for a store.

    The store isn't opened or closed here, that's up to the caller. A Reporter
    holds no other state and can be shared between threads.
    """

    def __init__(self, store, max_workers=None, debug_print=None):
        """Parameters:

            store       Something with a get() method, see activeusers.store.
            max_workers The maximum number of concurrent fetches.
            debug_print A print function for debug output.
        """
        self.store = store
        self.max_workers = max_workers
        self.debug_print = debug_print
        return

    def active_users(self, key_or_keys):
        return cardinality( aggregate( self.store, key_or_keys, self.max_workers, self.debug_print ) )

    def daily(self, options=None, **kwargs):
        options = Options.coerce(options, **kwargs)
        return self.active_users( keys.key_for( options.action, options.date ) )

    def weekly(self, options=None, **kwargs):
        options = Options.coerce(options, **kwargs)
        return self.active_users( keys.week_keys( options.date, options.action ) )

    def monthly(self, options=None, **kwargs):
        options = Options.coerce(options, **kwargs)
        return self.active_users( keys.month_keys( options.date, options.action ) )

    def count(self, options=None, **kwargs):
        """Active users at whatever granularity the options call for."""
        options = Options.coerce(options, **kwargs)
        return self.active_users( keys.range_keys( options.granularity, options.date, options.action ) )

    def get_users(self, options=None, **kwargs):
        """The users active on each day of the period.

        Returns a UsersList (see activeusers.aggregate).
        """
        options = Options.coerce(options, **kwargs)
        return enumerate_users( self.store,
                                keys.range_keys( options.granularity, options.date, options.action ),
                                self.max_workers, self.debug_print
                            )

def create_client(redis_server='localhost', port=6379, db=0, max_workers=None, debug_print=None, **kwargs):
    """A Reporter reading directly from Redis.

    Additional keyword arguments are passed to RedisStore.
    """
    return Reporter( RedisStore( redis_server, port, db, **kwargs ), max_workers, debug_print )
