import unittest
from unittest.mock import patch
from src.torrent.bencode import decode
from src.torrent.printer import format_tree, print_tree

class TestPrinter(unittest.TestCase):
    def test_format_dict(self):
        tree = decode(b'd3:cow3:moo4:listli1eee')
        self.assertEqual(format_tree(tree), [
            'Dict:',
            '    cow:',
            '        String: 3, moo',
            '    list:',
            '        List:',
            '            Integer: 1',
        ])

    def test_blob_hidden(self):
        tree = decode(b'100:' + b'\x00' * 100)
        self.assertEqual(format_tree(tree, 2), ['  <blob>...</blob>'])

    def test_binary_escaped(self):
        self.assertEqual(format_tree(decode(b'2:\xff\x41')), ['String: 2, \\xffA'])

    def test_rejects_non_value(self):
        with self.assertRaises(TypeError):
            format_tree('text')

    def test_print_tree(self):
        with patch('builtins.print') as mock_print:
            print_tree(decode(b'i-7e'))
        mock_print.assert_called_once_with('Integer: -7')

if __name__ == '__main__':
    unittest.main()
