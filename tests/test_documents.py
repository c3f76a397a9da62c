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
import dataclasses
import logging
import os
import tempfile
import unittest
from decimal import Decimal
from io import StringIO, BytesIO
from pathlib import Path
from typing import Annotated, Optional
from xml.etree import ElementTree

from xmlrecords import from_xml, from_etree, to_dict, to_etree, to_xml, \
    document_to_etree, get_namespaces, xml_field, FixedSize, ConversionSettings
from xmlrecords.exceptions import XMLRecordsTypeError, XMLRecordsValueError, \
    XMLRecordsMissingField, XMLRecordsUnknownMember
from xmlrecords.types import NameNamespaceAnnotation, FieldDescriptor, \
    RecordType, STRING
from xmlrecords.utils.logger import logger


@dataclasses.dataclass
class Book:
    __xml_namespace__ = 'urn:books'
    __xml_prefix__ = 'bk'

    id: int = xml_field(attribute=True)
    title: str = xml_field(name='Title')
    tags: Annotated[list[str], FixedSize(2)] = dataclasses.field(default_factory=list)
    note: Optional[str] = None


@dataclasses.dataclass
class Item:
    code: str = xml_field(attribute=True)
    price: Decimal = Decimal('0')


@dataclasses.dataclass
class Order:
    __xml_name__ = 'order'

    number: int
    items: list[Item] = xml_field(name='item', default_factory=list)
    paid: bool = False


@dataclasses.dataclass
class Node:
    value: float
    children: list['Node'] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class Entry:
    __xml_name__ = 'entry'

    v: int


@dataclasses.dataclass
class Entries:
    entries: list[Entry] = dataclasses.field(default_factory=list)


BOOK_XML = '<bk:Book xmlns:bk="urn:books" id="7">' \
           '<Title>Dune</Title><tags>a</tags><tags>b</tags></bk:Book>'

BOOK_RECORD = {'id': 7, 'title': 'Dune', 'tags': ['a', 'b']}


class TestDocumentToRecord(unittest.TestCase):

    def test_from_string(self):
        self.assertEqual(from_xml(BOOK_XML, Book), BOOK_RECORD)
        self.assertEqual(from_xml('\n  ' + BOOK_XML, Book), BOOK_RECORD)
        self.assertEqual(from_xml(BOOK_XML.encode('utf-8'), Book), BOOK_RECORD)

    def test_from_file_like_objects(self):
        self.assertEqual(from_xml(StringIO(BOOK_XML), Book), BOOK_RECORD)
        self.assertEqual(from_xml(BytesIO(BOOK_XML.encode('utf-8')), Book), BOOK_RECORD)

    def test_from_file_path(self):
        with tempfile.TemporaryDirectory() as dirname:
            filename = os.path.join(dirname, 'book.xml')
            with open(filename, 'w', encoding='utf-8') as fp:
                fp.write('<?xml version="1.0" encoding="UTF-8"?>\n')
                fp.write(BOOK_XML)

            self.assertEqual(from_xml(filename, Book), BOOK_RECORD)
            self.assertEqual(from_xml(Path(filename), Book), BOOK_RECORD)

    def test_from_element_tree(self):
        root = ElementTree.XML(BOOK_XML)
        self.assertEqual(from_xml(root, Book), BOOK_RECORD)
        self.assertEqual(from_xml(ElementTree.ElementTree(root), Book), BOOK_RECORD)
        self.assertEqual(from_etree(root, Book), BOOK_RECORD)
        self.assertEqual(from_etree(root, Book, namespaces={'bk': 'urn:books'}), BOOK_RECORD)

        self.assertRaises(XMLRecordsTypeError, from_etree, BOOK_XML, Book)

    def test_invalid_sources(self):
        self.assertRaises(XMLRecordsTypeError, from_xml, 10, Book)
        self.assertRaises(XMLRecordsTypeError, from_xml, BOOK_XML, dict[int, str])

    def test_nested_dataclasses(self):
        xml = """<order>
            <number>10</number>
            <item code="a1"><price>1.50</price></item>
            <item code="b2"/>
            <paid>true</paid>
        </order>"""
        self.assertEqual(from_xml(xml, Order), {
            'number': 10,
            'items': [{'code': 'a1', 'price': Decimal('1.50')}, {'code': 'b2'}],
            'paid': True,
        })

        with self.assertRaises(XMLRecordsMissingField) as ctx:
            from_xml('<order><item code="a1"/></order>', Order)
        self.assertEqual(ctx.exception.field, 'number')

    def test_conversion_options(self):
        xml = '<order><number>1</number><total>5</total></order>'
        self.assertEqual(from_xml(xml, Order), {'number': 1})
        with self.assertRaises(XMLRecordsUnknownMember) as ctx:
            from_xml(xml, Order, unknown_members='error')
        self.assertEqual(ctx.exception.path, '/order/total')

        settings = ConversionSettings(unknown_members='error')
        self.assertRaises(XMLRecordsUnknownMember, from_xml, xml, Order, settings)
        self.assertEqual(from_xml(xml, Order, settings, unknown_members='ignore'),
                         {'number': 1})

    def test_loglevel_argument(self):
        xml = '<order><number>1</number><total>5</total></order>'
        level = logger.level
        try:
            logger.setLevel(logging.WARNING)
            with self.assertLogs('xmlrecords', level='DEBUG') as ctx:
                from_xml(xml, Order, loglevel='DEBUG')
            self.assertIn('/order/total', ctx.output[0])

            from_xml(xml, Order, loglevel=logging.DEBUG)
            self.assertEqual(logger.level, logging.WARNING)

            self.assertRaises(XMLRecordsValueError, from_xml, xml, Order, loglevel='foo')
        finally:
            logger.setLevel(level)


class TestRecordToDocument(unittest.TestCase):

    def test_to_dict(self):
        self.assertEqual(to_dict(BOOK_RECORD, Book), {'bk:Book': {
            'attribute_xmlns:bk': 'urn:books',
            'attribute_id': 7,
            'Title': 'Dune',
            'tags': ['a', 'b'],
        }})
        self.assertEqual(to_dict(Book(7, 'Dune', ['a', 'b']), Book),
                         to_dict(BOOK_RECORD, Book))
        self.assertEqual(to_dict(BOOK_RECORD, Book, attr_prefix='@'), {'bk:Book': {
            '@xmlns:bk': 'urn:books', '@id': 7, 'Title': 'Dune', 'tags': ['a', 'b'],
        }})

    def test_to_dict_of_nested_dataclasses(self):
        order = Order(1, [Item('a1', Decimal('2.5')), Item('b2')])
        self.assertEqual(to_dict(order, Order), {'order': {
            'number': 1,
            'item': [
                {'attribute_code': 'a1', 'price': Decimal('2.5')},
                {'attribute_code': 'b2', 'price': Decimal('0')},
            ],
            'paid': False,
        }})

    def test_get_namespaces(self):
        document = {'a': {
            'attribute_xmlns': 'urn:x',
            'b': [{'attribute_xmlns:p': 'urn:p'}, {'attribute_xmlns:p': 'urn:q'}],
            'c': {'d': {'attribute_xmlns:q': 'urn:q'}},
        }}
        self.assertEqual(get_namespaces(document), {'': 'urn:x', 'p': 'urn:p', 'q': 'urn:q'})
        self.assertEqual(get_namespaces(document, attr_prefix='@'), {})
        self.assertEqual(get_namespaces({'a': 'text'}), {})

    def test_document_to_etree(self):
        document = {'root': {
            'attribute_xmlns:p': 'urn:p',
            'attribute_a': 1,
            'attribute_none': None,
            'p:child': [1, 2],
            '#content': 'text',
            'other': {'attribute_p:x': True, 'value': Decimal('1.10')},
            'values': {'#content': [1.0, float('inf')]},
        }}
        root = document_to_etree(document)
        self.assertEqual(root.tag, 'root')
        self.assertEqual(root.attrib, {'a': '1'})
        self.assertEqual(root.text, 'text')
        self.assertEqual([e.tag for e in root], ['{urn:p}child', '{urn:p}child', 'other', 'values'])
        self.assertEqual([e.text for e in root.findall('{urn:p}child')], ['1', '2'])

        other = root.find('other')
        self.assertEqual(other.attrib, {'{urn:p}x': 'true'})
        self.assertEqual(other.find('value').text, '1.10')
        self.assertEqual(root.find('values').text, '1.0 INF')

        root = document_to_etree({'d': {'attribute_xmlns': 'urn:d', 'a': 'x'}})
        self.assertEqual(root.tag, '{urn:d}d')
        self.assertEqual(root[0].tag, '{urn:d}a')

    def test_document_to_etree_errors(self):
        self.assertRaises(XMLRecordsTypeError, document_to_etree, [])
        self.assertRaises(XMLRecordsValueError, document_to_etree, {})
        self.assertRaises(XMLRecordsValueError, document_to_etree, {'a': 1, 'b': 2})
        self.assertRaises(XMLRecordsValueError, document_to_etree, {'p:a': 1})
        self.assertRaises(XMLRecordsValueError, document_to_etree, {'a': {'xmlns:x': 1}})
        self.assertRaises(XMLRecordsValueError, document_to_etree,
                          {'a': {'attribute_p:x': 1}})

    def test_to_etree(self):
        root = to_etree(BOOK_RECORD, Book)
        self.assertEqual(root.tag, '{urn:books}Book')
        self.assertEqual(root.get('id'), '7')
        self.assertEqual([e.tag for e in root], ['Title', 'tags', 'tags'])

    def test_to_xml(self):
        record_type = RecordType('Book', [
            FieldDescriptor('id', STRING, annotation=NameNamespaceAnnotation(is_attribute=True)),
            FieldDescriptor('title', STRING),
        ])
        xml = to_xml({'id': '1', 'title': 'Dune'}, record_type)
        self.assertEqual(xml, '<Book id="1"><title>Dune</title></Book>')

        xml = to_xml({'id': '1', 'title': 'Dune'}, record_type, xml_declaration=True)
        self.assertTrue(xml.startswith('<?xml '))
        self.assertIn('<title>Dune</title>', xml)


class TestRoundTrip(unittest.TestCase):

    def test_prefixed_namespace(self):
        xml = to_xml(BOOK_RECORD, Book)
        self.assertIn('urn:books', xml)
        self.assertEqual(from_xml(xml, Book), BOOK_RECORD)

    def test_default_namespace(self):
        record_type = RecordType(
            name='Doc',
            fields=[FieldDescriptor('a', STRING)],
            annotation=NameNamespaceAnnotation(namespace='urn:d')
        )
        xml = to_xml({'a': 'x'}, record_type)
        self.assertEqual(from_xml(xml, record_type), {'a': 'x'})

    def test_nested_records(self):
        order = {
            'number': 3,
            'items': [{'code': 'a1', 'price': Decimal('1.5')}],
            'paid': True,
        }
        xml = to_xml(order, Order)
        self.assertEqual(from_xml(xml, Order), order)

        xml = to_xml(order, Order, indent='  ')
        self.assertEqual(from_xml(xml, Order), order)

    def test_arrays_of_named_records(self):
        value = {'entries': [{'v': 1}, {'v': 2}]}
        xml = to_xml(value, Entries)
        self.assertEqual(xml, '<Entries><entry><v>1</v></entry><entry><v>2</v></entry></Entries>')
        self.assertEqual(from_xml(xml, Entries), value)

    def test_recursive_records(self):
        node = {'value': 1.0, 'children': [
            {'value': 2.0, 'children': []},
            {'value': 3.5, 'children': [{'value': -1.0}]},
        ]}
        xml = to_xml(node, Node)
        self.assertEqual(from_xml(xml, Node), {'value': 1.0, 'children': [
            {'value': 2.0},
            {'value': 3.5, 'children': [{'value': -1.0}]},
        ]})


if __name__ == '__main__':
    unittest.main()
