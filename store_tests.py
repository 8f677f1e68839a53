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

import unittest
from unittest import mock

import redis
import dns.rcode
import dns.rdatatype as rdtype
import dns.resolver
from dns.exception import Timeout

import activeusers.store as store
from activeusers.errors import StoreError

class FakeName(object):
    def __init__(self, text):
        self.text = text
        return

    def to_text(self):
        return self.text

class FakeRdata(object):
    def __init__(self, *strings):
        self.strings = strings
        return

class FakeRRset(list):
    def __init__(self, name, rdtype, rdatas):
        list.__init__(self, rdatas)
        self.name = FakeName(name)
        self.rdtype = rdtype
        return

def fake_answer(qname, rrsets, rcode=dns.rcode.NOERROR):
    """Something which looks enough like a dns.resolver.Answer."""
    answer = mock.Mock()
    answer.response.rcode.return_value = rcode
    answer.response.question = [ mock.Mock() ]
    answer.response.question[0].name = FakeName(qname + '.')
    answer.response.answer = rrsets
    return answer

class TestRedisStore(unittest.TestCase):
    """Reading directly from Redis."""

    def test_get(self):
        client = mock.Mock()
        client.get.return_value = b'\xa0'
        self.assertEqual(store.RedisStore(client=client).get('active-2024-01-01'), b'\xa0')
        client.get.assert_called_once_with('active-2024-01-01')
        return

    def test_missing(self):
        client = mock.Mock()
        client.get.return_value = None
        self.assertIsNone(store.RedisStore(client=client).get('active-2024-01-01'))
        return

    def test_error(self):
        client = mock.Mock()
        client.get.side_effect = redis.exceptions.ConnectionError('Connection refused')
        with self.assertLogs(level='ERROR'):
            with self.assertRaises(StoreError) as context:
                store.RedisStore(client=client).get('active-2024-01-01')
        self.assertIsInstance(context.exception.__cause__, redis.exceptions.ConnectionError)
        return

class TestRkvdnsStore(unittest.TestCase):
    """Reading through RKVDNS."""

    RKVDNS = 'redis.example.com'

    def setUp(self):
        patcher = mock.patch.object(dns.resolver, 'Resolver')
        self.resolver_class = patcher.start()
        self.addCleanup(patcher.stop)
        self.dns = self.resolver_class.return_value
        self.store = store.RkvdnsStore(self.RKVDNS + '.')
        return

    def test_qname(self):
        self.assertEqual(self.store.qname('active-2024-01-01'), 'active-2024-01-01.get.redis.example.com')
        self.assertEqual(self.store.qname('a.b;c-2024-01-01'), 'a\\.b\\;c-2024-01-01.get.redis.example.com')
        return

    def test_get(self):
        qname = self.store.qname('active-2024-01-01')
        self.dns.resolve.return_value = fake_answer(qname, [
                FakeRRset(qname + '.', rdtype.TXT, [ FakeRdata(b'\xa0', b'\x01') ])
            ])
        self.assertEqual(self.store.get('active-2024-01-01'), b'\xa0\x01')
        self.dns.resolve.assert_called_once_with(qname, rdtype.TXT, raise_on_no_answer=False)
        return

    def test_nxdomain(self):
        self.dns.resolve.side_effect = dns.resolver.NXDOMAIN()
        self.assertIsNone(self.store.get('active-2024-01-01'))
        return

    def test_no_answer(self):
        qname = self.store.qname('active-2024-01-01')
        self.dns.resolve.return_value = fake_answer(qname, [])
        self.assertIsNone(self.store.get('active-2024-01-01'))
        return

    def test_error_txt(self):
        """RKVDNS with ENABLE_ERROR_TXT reports errors as a CNAME."""
        qname = self.store.qname('active-2024-01-01')
        cname = FakeRRset(qname + '.', rdtype.CNAME, [ mock.Mock(**{ 'to_text.return_value': 'wrongtype.error.' }) ])
        self.dns.resolve.return_value = fake_answer(qname, [ cname ])
        with self.assertLogs(level='ERROR'):
            with self.assertRaises(StoreError) as context:
                self.store.get('active-2024-01-01')
        self.assertIn('wrongtype.error.', str(context.exception))
        self.assertNotIn('NOERROR', str(context.exception))
        return

    def test_servfail(self):
        qname = self.store.qname('active-2024-01-01')
        self.dns.resolve.return_value = fake_answer(qname, [], rcode=dns.rcode.SERVFAIL)
        with self.assertLogs(level='ERROR'):
            with self.assertRaises(StoreError) as context:
                self.store.get('active-2024-01-01')
        self.assertIn('SERVFAIL', str(context.exception))
        return

    def test_timeout(self):
        self.dns.resolve.side_effect = Timeout()
        with self.assertLogs(level='ERROR'):
            with self.assertRaises(StoreError):
                self.store.get('active-2024-01-01')
        return

    def test_nameservers(self):
        rkvdns = store.RkvdnsStore('Redis.Example.Com', '10.0.0.1')
        self.assertEqual(rkvdns.rkvdns, 'redis.example.com')
        self.assertEqual(rkvdns.pool.nameservers, [ '10.0.0.1' ])
        with rkvdns.pool as resolver:
            pass
        self.resolver_class.assert_called_with(configure=False)
        self.assertEqual(resolver.resolver.nameservers, [ '10.0.0.1' ])
        return

class TestResolverPool(unittest.TestCase):
    """The pool of resolvers."""

    def test_reuse(self):
        with mock.patch.object(dns.resolver, 'Resolver') as resolver_class:
            pool = store.ResolverPool()
            with pool as first:
                pass
            with pool as second:
                self.assertIs(second, first)
            self.assertEqual(pool.contexts, {})
            resolver_class.assert_called_once_with()
        return

if __name__ == '__main__':
    unittest.main(verbosity=2)
