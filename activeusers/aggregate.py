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

"""Fetching and combining daily bitmaps.

Assets here address the following concerns:

* Marshalling the fetches for a range of keys out to a thread pool.
* Reducing the fetched bitmaps to a single bitmap (aggregate()).
* Listing every bit set on every day (enumerate_users()).

The store is anything with a get() method:

    store.get( key )

which returns the value as bytes, or None if the key doesn't exist. See
activeusers.store for the Redis and RKVDNS implementations.

Errors
------

Nothing is caught here. If any fetch raises an exception the fetches which
haven't started yet are cancelled and the exception is raised to the caller.
There are no partial results.
"""

import concurrent.futures

from .bits import union, BitSet
from .errors import InputError
from .keys import key_date
from . import dates

def fetch(store, keys, max_workers=None, debug_print=None):
    """Get the values for all of the keys in parallel.

    Return: A hash of the keys with the fetched buffers (or None) as values.

    Pass something like print or logging.info as debug_print to see each of the
    fetches as they complete.
    """
    results = dict()
    if not keys:
        return results
    with concurrent.futures.ThreadPoolExecutor(max_workers) as executor:
        threads = dict()
        for key in keys:
            if key in results:
                continue
            results[key] = None
            threads[ executor.submit( store.get, key ) ] = key
        try:
            for thread in concurrent.futures.as_completed( threads ):
                results[ threads[thread] ] = value = thread.result()
                if debug_print:
                    debug_print('{} -- {}'.format(threads[thread], value is None and 'missing' or '{} bytes'.format(len(value))))
        except BaseException:
            for thread in threads:
                thread.cancel()
            raise

    return results

def aggregate(store, key_or_keys, max_workers=None, debug_print=None):
    """Bitwise OR of the bitmaps for the keys, as an integer.

    key_or_keys can be a single key or a sequence of keys. Missing keys count
    as zero. The order of the keys doesn't matter, nor do duplicates.
    """
    if isinstance(key_or_keys, str):
        keys = [ key_or_keys ]
    else:
        keys = list(key_or_keys)
    return union( fetch( store, keys, max_workers, debug_print ).values() )

class UsersList(dict):
    """The users active on each day of a range.

    A dict with three keys:

        from    The first day (a date).
        to      The last day (a date).
        ids     A list of dicts, one for each user on each day:

                    { 'id': <user number>, 'date': 'YYYY-MM-DD' }

    A user active on three days appears three times.
    """
    def __init__(self, first, last):
        dict.__init__(self, ids=[])
        self['from'] = first
        self['to'] = last
        return

    def append(self, user, day):
        self['ids'].append( dict(id=user, date=dates.format_iso_date(day)) )
        return

def enumerate_users(store, keys, max_workers=None, debug_print=None):
    """List the users set in each day's bitmap.

    The keys are expected to be in chronological order. Users are listed in key
    order and then in ascending order within each key.
    """
    keys = list(keys)
    if not keys:
        raise InputError('No keys to enumerate.')

    users = UsersList( key_date(keys[0]), key_date(keys[-1]) )
    buffers = fetch( store, keys, max_workers, debug_print )

    for key in keys:
        day = key_date(key)
        for user in BitSet( buffers[key] ).positions():
            users.append( user, day )

    return users
