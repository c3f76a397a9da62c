#!/usr/bin/env python
#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
import unittest

from xmlrecords.exceptions import XMLRecordsValueError, XMLRecordsTypeError
from xmlrecords.names import NS_NOT_DECLARED, XSI_NAMESPACE
from xmlrecords.qnames import QualifiedName, get_namespace, get_qname, local_name, \
    split_prefixed_name, get_prefixed_name, lookup_name
from xmlrecords.types import NameNamespaceAnnotation


class TestQualifiedName(unittest.TestCase):

    def test_initialization(self):
        qname = QualifiedName('urn:a', 'item', 'a')
        self.assertEqual(qname.namespace, 'urn:a')
        self.assertEqual(qname.local_name, 'item')
        self.assertEqual(qname.prefix, 'a')
        self.assertEqual(repr(qname), "QualifiedName('urn:a', 'item', 'a')")
        self.assertEqual(str(qname), '{urn:a}item')

        qname = QualifiedName(None, 'item')
        self.assertEqual(qname.namespace, '')
        self.assertEqual(qname.prefix, '')
        self.assertEqual(repr(qname), "QualifiedName('', 'item')")
        self.assertEqual(str(qname), 'item')

        self.assertEqual(str(QualifiedName(NS_NOT_DECLARED, 'item')), 'item')
        self.assertRaises(XMLRecordsTypeError, QualifiedName, 'urn:a', None)

    def test_equality_ignores_prefixes(self):
        qname1 = QualifiedName('urn:a', 'item', 'a')
        qname2 = QualifiedName('urn:a', 'item', 'b')
        self.assertEqual(qname1, qname2)
        self.assertEqual(hash(qname1), hash(qname2))
        self.assertEqual(len({qname1, qname2}), 1)

        self.assertNotEqual(qname1, QualifiedName('urn:b', 'item', 'a'))
        self.assertNotEqual(qname1, QualifiedName('urn:a', 'other', 'a'))
        self.assertNotEqual(qname1, '{urn:a}item')

    def test_sentinel_is_not_the_empty_namespace(self):
        qname1 = QualifiedName('', 'item')
        qname2 = QualifiedName(NS_NOT_DECLARED, 'item')
        self.assertNotEqual(qname1, qname2)
        self.assertTrue(qname1.is_annotated)
        self.assertFalse(qname2.is_annotated)

    def test_immutability(self):
        qname = QualifiedName('urn:a', 'item', 'a')
        with self.assertRaises(XMLRecordsValueError):
            qname.local_name = 'other'
        with self.assertRaises(XMLRecordsValueError):
            del qname.prefix

        renamed = qname.with_local_name('other')
        self.assertEqual(renamed, QualifiedName('urn:a', 'other'))
        self.assertEqual(renamed.prefix, 'a')
        self.assertEqual(qname.local_name, 'item')

    def test_from_extended(self):
        qname = QualifiedName.from_extended('{urn:a}item', 'a')
        self.assertEqual(qname, QualifiedName('urn:a', 'item'))
        self.assertEqual(qname.prefixed_name, 'a:item')

        qname = QualifiedName.from_extended('item')
        self.assertEqual(qname, QualifiedName('', 'item'))
        self.assertEqual(qname.prefixed_name, 'item')

    def test_from_annotation(self):
        qname = QualifiedName.from_annotation(None, 'item')
        self.assertEqual(qname, QualifiedName(NS_NOT_DECLARED, 'item'))

        annotation = NameNamespaceAnnotation(name='Item')
        qname = QualifiedName.from_annotation(annotation, 'item')
        self.assertEqual(qname, QualifiedName(NS_NOT_DECLARED, 'Item'))

        annotation = NameNamespaceAnnotation(namespace='urn:a', prefix='a')
        qname = QualifiedName.from_annotation(annotation, 'item')
        self.assertEqual(qname, QualifiedName('urn:a', 'item'))
        self.assertEqual(qname.prefix, 'a')

        annotation = NameNamespaceAnnotation(namespace='')
        qname = QualifiedName.from_annotation(annotation, 'item')
        self.assertEqual(qname, QualifiedName('', 'item'))

        # Malformed annotations degrade to the raw name
        annotation = NameNamespaceAnnotation(name='')
        qname = QualifiedName.from_annotation(annotation, 'item')
        self.assertEqual(qname, QualifiedName(NS_NOT_DECLARED, 'item'))

    def test_lookup_name(self):
        index = {
            QualifiedName(NS_NOT_DECLARED, 'a'): 1,
            QualifiedName('urn:b', 'b'): 2,
            QualifiedName('', 'c'): 3,
        }
        self.assertEqual(lookup_name(index, QualifiedName('', 'a')), 1)
        self.assertEqual(lookup_name(index, QualifiedName('urn:x', 'a')), 1)
        self.assertEqual(lookup_name(index, QualifiedName('urn:b', 'b', 'x')), 2)
        self.assertIsNone(lookup_name(index, QualifiedName('', 'b')))
        self.assertIsNone(lookup_name(index, QualifiedName('urn:c', 'b')))
        self.assertEqual(lookup_name(index, QualifiedName('', 'c')), 3)
        self.assertIsNone(lookup_name(index, QualifiedName('urn:c', 'c')))


class TestQNameHelpers(unittest.TestCase):

    def test_get_namespace(self):
        self.assertEqual(get_namespace(''), '')
        self.assertEqual(get_namespace('local'), '')
        self.assertEqual(get_namespace(f'{{{XSI_NAMESPACE}}}type'), XSI_NAMESPACE)
        self.assertEqual(get_namespace('{wrong'), '')
        self.assertEqual(get_namespace('{}name'), '')
        self.assertRaises(XMLRecordsTypeError, get_namespace, 1)

    def test_get_qname(self):
        self.assertEqual(get_qname('urn:a', 'item'), '{urn:a}item')
        self.assertEqual(get_qname('urn:a', '{urn:b}item'), '{urn:b}item')
        self.assertEqual(get_qname(None, 'item'), 'item')
        self.assertEqual(get_qname('', 'item'), 'item')
        self.assertEqual(get_qname(NS_NOT_DECLARED, 'item'), 'item')
        self.assertEqual(get_qname('urn:a', ''), '')
        self.assertRaises(XMLRecordsTypeError, get_qname, 'urn:a', None)

    def test_local_name(self):
        self.assertEqual(local_name('item'), 'item')
        self.assertEqual(local_name('{urn:a}item'), 'item')
        self.assertEqual(local_name('a:item'), 'item')
        self.assertEqual(local_name(''), '')
        self.assertRaises(XMLRecordsValueError, local_name, '{ns name')
        self.assertRaises(XMLRecordsTypeError, local_name, 1.0)

    def test_prefixed_names(self):
        self.assertEqual(split_prefixed_name('a:item'), ('a', 'item'))
        self.assertEqual(split_prefixed_name('item'), ('', 'item'))
        self.assertEqual(get_prefixed_name('a', 'item'), 'a:item')
        self.assertEqual(get_prefixed_name(None, 'item'), 'item')
        self.assertEqual(get_prefixed_name('', 'item'), 'item')


if __name__ == '__main__':
    unittest.main()
