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
"""Tests on conversion settings, logging helpers and exceptions"""
import logging
import unittest
from decimal import Decimal

from xmlrecords.exceptions import XMLRecordsTypeError, XMLRecordsValueError, \
    XMLRecordsAttributeError, XMLRecordsConversionError, XMLRecordsSchemaConflict, \
    XMLRecordsMissingField, XMLRecordsMissingAttribute, XMLRecordsArraySizeError, \
    XMLRecordsTypeConversionError, XMLRecordsUnknownMember, XMLRecordsNameMismatch, \
    XMLRecordsNamespaceMismatch
from xmlrecords.settings import ConversionSettings, get_settings
from xmlrecords.utils.decoding import raw_encode_value
from xmlrecords.utils.logger import logger, logged, set_logging_level, format_path


class TestConversionSettings(unittest.TestCase):

    def test_defaults(self):
        settings = ConversionSettings()
        self.assertEqual(settings.unknown_members, 'ignore')
        self.assertEqual(settings.attr_prefix, 'attribute_')
        self.assertEqual(settings.content_key, '#content')
        self.assertTrue(settings.strip_whitespace)
        self.assertTrue(settings.check_names)
        self.assertIsNone(settings.loglevel)
        self.assertEqual(settings.xmlns_key, 'attribute_xmlns')
        self.assertEqual(settings.get_xmlns_key(), 'attribute_xmlns')
        self.assertEqual(settings.get_xmlns_key('p'), 'attribute_xmlns:p')

    def test_option_validation(self):
        self.assertRaises(XMLRecordsValueError, ConversionSettings, attr_prefix='')
        self.assertRaises(XMLRecordsTypeError, ConversionSettings, attr_prefix=1)
        self.assertRaises(XMLRecordsValueError, ConversionSettings, content_key='')
        self.assertRaises(XMLRecordsValueError, ConversionSettings, unknown_members='raise')
        self.assertRaises(XMLRecordsTypeError, ConversionSettings, strip_whitespace='yes')
        self.assertRaises(XMLRecordsTypeError, ConversionSettings, check_names=None)
        self.assertRaises(XMLRecordsValueError, ConversionSettings, loglevel='verbose')
        self.assertRaises(XMLRecordsTypeError, ConversionSettings, loglevel=True)

        self.assertEqual(ConversionSettings(loglevel='debug').loglevel, logging.DEBUG)
        self.assertEqual(ConversionSettings(loglevel=20).loglevel, logging.INFO)

    def test_immutability(self):
        settings = ConversionSettings(attr_prefix='@')
        with self.assertRaises(XMLRecordsAttributeError):
            settings.attr_prefix = '-'
        with self.assertRaises(XMLRecordsAttributeError):
            del settings.attr_prefix
        self.assertEqual(settings.attr_prefix, '@')

    def test_get_settings(self):
        settings = get_settings()
        self.assertIs(get_settings(), settings)

        custom = get_settings(attr_prefix='@', content_key='$')
        self.assertIsNot(custom, settings)
        self.assertEqual(custom.attr_prefix, '@')
        self.assertEqual(custom.xmlns_key, '@xmlns')
        self.assertEqual(custom.content_key, '$')
        self.assertEqual(settings.attr_prefix, 'attribute_')

        self.assertIs(get_settings(settings=custom), custom)
        self.assertEqual(get_settings(settings=custom, strip_whitespace=False).attr_prefix, '@')

        self.assertRaises(XMLRecordsTypeError, get_settings, settings={'attr_prefix': '@'})
        self.assertRaises(XMLRecordsTypeError, get_settings, prefix='@')

    def test_update_defaults(self):
        try:
            ConversionSettings.update_defaults(content_key='$')
            self.assertEqual(get_settings().content_key, '$')
            self.assertEqual(get_settings(attr_prefix='@').content_key, '$')
        finally:
            ConversionSettings.reset_defaults()

        self.assertEqual(get_settings().content_key, '#content')


class TestLogger(unittest.TestCase):

    def setUp(self):
        self.level = logger.level

    def tearDown(self):
        logger.setLevel(self.level)

    def test_set_logging_level(self):
        set_logging_level('debug')
        self.assertEqual(logger.level, logging.DEBUG)
        set_logging_level(' Warning ')
        self.assertEqual(logger.level, logging.WARNING)
        set_logging_level(logging.ERROR)
        self.assertEqual(logger.level, logging.ERROR)
        self.assertRaises(XMLRecordsValueError, set_logging_level, 'verbose')

    def test_logged_decorator(self):
        @logged
        def get_level(**kwargs):
            return logger.level

        logger.setLevel(logging.WARNING)
        self.assertEqual(get_level(), logging.WARNING)
        self.assertEqual(get_level(loglevel='INFO'), logging.INFO)
        self.assertEqual(get_level(loglevel=logging.DEBUG), logging.DEBUG)
        self.assertEqual(logger.level, logging.WARNING)

    def test_logged_method(self):
        class Converter:
            def __init__(self, **kwargs):
                self.settings = ConversionSettings(**kwargs)

            @logged
            def get_level(self, **kwargs):
                return logger.level

        logger.setLevel(logging.WARNING)
        self.assertEqual(Converter().get_level(), logging.WARNING)
        self.assertEqual(Converter(loglevel='debug').get_level(), logging.DEBUG)
        self.assertEqual(Converter(loglevel='debug').get_level(loglevel='ERROR'),
                         logging.ERROR)
        self.assertEqual(logger.level, logging.WARNING)

    def test_format_path(self):
        self.assertEqual(format_path(['Book']), '/Book')
        self.assertEqual(format_path(['Book', 'author', 'name']), '/Book/author/name')


class TestExceptions(unittest.TestCase):

    def test_conversion_error(self):
        err = XMLRecordsConversionError('invalid data')
        self.assertIsInstance(err, ValueError)
        self.assertIsNone(err.path)
        self.assertEqual(str(err), 'invalid data')

        err = XMLRecordsConversionError('invalid data', '/Book/title')
        self.assertEqual(err.path, '/Book/title')
        self.assertEqual(str(err), 'invalid data\n\nPath: /Book/title')

    def test_schema_conflict(self):
        err = XMLRecordsSchemaConflict('item')
        self.assertEqual(str(err), "duplicate field 'item'")
        err = XMLRecordsSchemaConflict('item', 'Book')
        self.assertEqual(err.record, 'Book')
        self.assertEqual(str(err), "duplicate field 'item' in record type 'Book'")

    def test_missing_fields(self):
        err = XMLRecordsMissingField('title', 'Book', '/Book')
        self.assertEqual(err.kind, 'field')
        self.assertEqual(err.message,
                         "required field 'title' of record type 'Book' not present in XML")
        self.assertTrue(str(err).endswith('Path: /Book'))

        err = XMLRecordsMissingAttribute('id')
        self.assertIsInstance(err, XMLRecordsMissingField)
        self.assertEqual(str(err), "required attribute 'id' not present in XML")

    def test_array_size_error(self):
        err = XMLRecordsArraySizeError('coords', 3, 2)
        self.assertEqual((err.field, err.expected, err.actual), ('coords', 3, 2))
        self.assertIn('expected 3, got 2', str(err))

    def test_type_conversion_error(self):
        err = XMLRecordsTypeConversionError('abc', 'int')
        self.assertEqual(str(err), "can't convert 'abc' to int")
        err = XMLRecordsTypeConversionError('abc', 'int', 'not a number', '/R/v')
        self.assertEqual(err.reason, 'not a number')
        self.assertEqual(str(err), "can't convert 'abc' to int: not a number\n\nPath: /R/v")

    def test_name_errors(self):
        err = XMLRecordsUnknownMember('@lang', '/Book')
        self.assertEqual(err.name, '@lang')
        self.assertIn("'@lang'", str(err))

        err = XMLRecordsNameMismatch('book', 'Book')
        self.assertEqual((err.expected, err.actual), ('book', 'Book'))

        err = XMLRecordsNamespaceMismatch('Book', 'urn:a', '')
        self.assertEqual(err.record, 'Book')
        self.assertIn("expected 'urn:a', got ''", str(err))


class TestHelpers(unittest.TestCase):

    def test_raw_encode_value(self):
        self.assertEqual(raw_encode_value(True), 'true')
        self.assertEqual(raw_encode_value(False), 'false')
        self.assertEqual(raw_encode_value(10), '10')
        self.assertEqual(raw_encode_value(1.5), '1.5')
        self.assertEqual(raw_encode_value(float('nan')), 'NaN')
        self.assertEqual(raw_encode_value(float('-inf')), '-INF')
        self.assertEqual(raw_encode_value(Decimal('1E+2')), '100')
        self.assertEqual(raw_encode_value([1, None, True]), '1  true')
        self.assertEqual(raw_encode_value(b'abc'), 'abc')
        self.assertIsNone(raw_encode_value(None))


if __name__ == '__main__':
    unittest.main()
