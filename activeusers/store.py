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

"""Stores.

A store has a single method:

    get( key )  Returns the value as bytes, or None if the key doesn't exist.

get() is called from multiple threads at once. Both of the stores here are
threadsafe.

RedisStore
----------

Reads directly from Redis.

RkvdnsStore
-----------

Reads through RKVDNS (https://github.com/m3047/rkvdns), which serves Redis
keys as DNS TXT records. The query looks something like:

    active-2024-01-01.get.redis.example.com

where redis.example.com is the domain that RKVDNS serves responses under. The
TXT strings are reassembled into the original value. A nonexistent key
(NXDOMAIN, or an empty answer) is None.

Don't run RKVDNS in case folding mode if your actions have upper case letters
in them.
"""

import logging

import redis

import dns.resolver as resolver
import dns.rdatatype as rdtype
from dns.exception import DNSException
import dns.rcode

import threading

from .errors import StoreError

ESCAPED = { c for c in '.;' }
MISSING_KEY_EXCEPTIONS = { 'NXDOMAIN', 'NoAnswer' }

def escape(qname):
    """Escape . and ;"""
    for c in ESCAPED:
        qname = qname.replace(c, '\\{}'.format(c))
    return qname

class RedisStore(object):
    """Bitmaps read directly from Redis."""

    CONNECT_TIMEOUT = 5

    def __init__(self, redis_server='localhost', port=6379, db=0, connect_timeout=CONNECT_TIMEOUT, client=None):
        """Connect to Redis.

        If client is supplied it is used as is and the other parameters are
        ignored. It needs to have been created with decode_responses=False.
        """
        if client is None:
            client = redis.client.Redis(redis_server, port, db, decode_responses=False,
                                        socket_connect_timeout=connect_timeout
                                    )
        self.redis = client
        return

    def get(self, key):
        try:
            return self.redis.get( key )
        except redis.exceptions.RedisError as e:
            logging.error('Redis error: {} {}'.format(type(e).__name__, e))
            raise StoreError('{} reading {}: {}'.format(type(e).__name__, key, e)) from e

class Resolver(object):
    """A wrapper around dns.resolver.Resolver which hangs on to the outcome.

    Support for ENABLE_ERROR_TXT
    ----------------------------

    RKVDNS has a configuration parameter which when enabled turns errors into
    a CNAME pointing at the error text. If such an error is seen, failure
    returns the error text.

    This is not threadsafe, see ResolverPool.
    """

    def __init__(self, nameservers=None):
        if nameservers:
            self.resolver = resolver.Resolver(configure=False)
            self.resolver.nameservers = nameservers
        else:
            self.resolver = resolver.Resolver()
        self.resp = None
        self.exc = None
        return

    def query(self, qname, qtype, **kwargs):
        """Query. FLUENT

        Returns a reference to the object itself.
        """
        try:
            self.resp = None
            self.exc = None
            if hasattr(self.resolver, 'resolve'):
                self.resp = self.resolver.resolve(qname, qtype, **kwargs)
            else:
                self.resp = self.resolver.query(qname, qtype, **kwargs)
        except DNSException as exc:
            self.exc = type(exc).__name__

        return self

    @property
    def error_txt(self):
        """The ENABLE_ERROR_TXT error text for the qname, if there is one."""
        qname = self.resp.response.question[0].name.to_text().lower()
        for rset in self.resp.response.answer:
            if rset.name.to_text().lower() != qname:
                continue
            if rset.rdtype == rdtype.CNAME and 'error' in rset[0].to_text().lower():
                return rset[0].to_text()
        return None

    @property
    def failure(self):
        """None if the query succeeded, otherwise what went wrong as text."""
        if self.exc:
            return self.exc
        rcode = self.resp.response.rcode()
        if rcode != dns.rcode.NOERROR:
            return dns.rcode.to_text(rcode)
        error_txt = self.error_txt
        if error_txt:
            return 'RKVDNS error "{}"'.format(error_txt)
        return None

    def result(self, qtype):
        """Returns the first rrset from the answer section with the qtype."""
        for rset in self.resp.response.answer:
            if rset.rdtype == qtype:
                return rset
        return []

class ResolverPool(object):
    """A threadsafe, self-managed pool of Resolver instances.

        with resolver_pool as resolver:
            resolver.query(...)

    A new Resolver is created whenever none are free.
    """

    def __init__(self, nameservers=None):
        self.nameservers = nameservers
        self.free_list = set()
        self.lock = threading.Lock()
        self.contexts = {}
        return

    def __enter__(self):
        with self.lock:
            if self.free_list:
                resolver = self.free_list.pop()
            else:
                resolver = Resolver(self.nameservers)
            self.contexts[threading.get_ident()] = resolver
        return resolver

    def __exit__(self, *exc):
        with self.lock:
            self.free_list.add( self.contexts.pop(threading.get_ident()) )
        return False

class RkvdnsStore(object):
    """Bitmaps read through RKVDNS."""

    def __init__(self, rkvdns, nameservers=None):
        """Parameters:

            rkvdns      The domain that RKVDNS serves responses under.
            nameservers A way to explicitly call out the nameservers to use.
        """
        self.rkvdns = rkvdns.strip('.').lower()
        if isinstance(nameservers, str):
            nameservers = [ nameservers ]
        self.pool = ResolverPool(nameservers and list(nameservers) or None)
        return

    def qname(self, key):
        return '{}.get.{}'.format( escape(key), self.rkvdns )

    def get(self, key):
        qname = self.qname(key)
        with self.pool as resolver:
            failure = resolver.query( qname, rdtype.TXT, raise_on_no_answer=False ).failure
            if failure in MISSING_KEY_EXCEPTIONS:
                return None
            if failure:
                logging.error('Query failure: {} -- {}'.format(qname, failure))
                raise StoreError('{} reading {}'.format(failure, key))
            result = resolver.result(rdtype.TXT)
            if not result:
                return None
            return b''.join( b''.join(rd.strings) for rd in result )
