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

"""Active Users.

Command line:

    activity.py <period> [<action> [<date>]] {+users} {+debug}

Prints the number of active users for the period.

    period      D(ay), W(eek) or M(onth).
    action      The tracked action. Optionally "-" can be specified as a placeholder
                representing the default action.
    date        Any day (YYYY-MM-DD) within the period. Defaults to today (UTC).
    users       If passed, each active user is listed (one line per user per day)
                after the count.
    debug       If passed, each Redis fetch is printed as it completes.

Corresponding entries can be set in an optional `client_config.py`:

    REDIS_SERVER    The address of the Redis server.
    REDIS_PORT      The Redis port.
    REDIS_DB        The Redis database number.
    RKVDNS          If set, the domain that rkvdns serves responses under. Keys are
                    read through RKVDNS instead of directly from Redis.
    DNS_SERVER      The address of the dns server to use with RKVDNS.
    ACTION          The default action.
    MAX_WORKERS     The number of concurrent fetches.
    LOG_LEVEL       Determines the logging level if not None.

See client_config-sample.py.
"""

import sys
import logging

from activeusers import Reporter, RedisStore, RkvdnsStore, ActiveUsersError
from activeusers.keys import GRANULARITIES

REDIS_SERVER = 'localhost'
REDIS_PORT = 6379
REDIS_DB = 0
RKVDNS = None
DNS_SERVER = None
ACTION = None
MAX_WORKERS = None
LOG_LEVEL = None

def lart(msg=None, help='activity D|W|M [action [date]] {+users} {+debug}'):
    if msg:
        print(msg, file=sys.stderr)
    if help:
        print(help, file=sys.stderr)
    sys.exit(1)

try:
    from client_config import *
except ImportError:
    pass
except Exception as e:
    lart('{}: {}'.format(type(e).__name__, e))

if RKVDNS is not None:
    RKVDNS = RKVDNS.strip('.').lower()

def make_store():
    if RKVDNS:
        return RkvdnsStore( RKVDNS, DNS_SERVER )
    return RedisStore( REDIS_SERVER, REDIS_PORT, REDIS_DB )

def main( granularity, action, date, print_users, debug, store=None ):

    if store is None:
        store = make_store()
    reporter = Reporter( store, MAX_WORKERS, debug and print or None )

    try:
        if print_users:
            # Each user is listed once per day they were active.
            users = reporter.get_users( granularity=granularity, action=action, date=date )
            count = len({ user['id'] for user in users['ids'] })
        else:
            users = None
            count = reporter.count( granularity=granularity, action=action, date=date )
    except ActiveUsersError as e:
        lart('{}: {}'.format(type(e).__name__, e), help=None)

    print(count)
    if users is None:
        return

    print('{} -- {}'.format(users['from'], users['to']))
    for user in users['ids']:
        print('{:>8d} {}'.format(user['id'], user['date']))

    return

if __name__ == '__main__':

    argv = sys.argv

    print_users = False
    debug = False
    while argv[-1].startswith('+'):
        arg = argv.pop()[1:]
        if   arg == 'users'[:len(arg)]:
            print_users = True
        elif arg == 'debug'[:len(arg)]:
            debug = True
        else:
            lart('Unrecognized option "{}"'.format(arg))

    if len(argv) < 2:
        lart('No period')
    granularity = argv[1].upper()[:1]
    if granularity not in GRANULARITIES:
        lart('Invalid period "{}"'.format(argv[1]))

    if len(argv) < 3 or argv[2] == '-':
        action = ACTION
    else:
        action = argv[2]

    if len(argv) < 4:
        date = None
    else:
        date = argv[3]

    if len(argv) > 4:
        lart('Too many arguments')

    if LOG_LEVEL is not None:
        logging.basicConfig(level=LOG_LEVEL)

    main( granularity, action, date, print_users, debug )
