# tests/test_main.py

import io
import os
import sys
import hashlib
import tempfile
import unittest
from unittest.mock import patch

# Add the project root directory
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from main import main
from src import config
from src.torrent.errors import AllocationError

INFO = b'd6:lengthi12e4:name8:file.bin12:piece lengthi16384e6:pieces20:' + b'\xaa' * 20 + b'e'
TORRENT = b'd8:announce14:localhost:80804:info' + INFO + b'e'

class TestMain(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.path = self._write('sample.torrent', TORRENT)

    def _write(self, name: str, data: bytes) -> str:
        path = os.path.join(self.tmp.name, name)
        with open(path, 'wb') as f:
            f.write(data)
        return path

    def _run(self, *argv):
        with patch('sys.stdout', new_callable=io.StringIO) as stdout:
            code = main(list(argv) + ['--log-level', 'CRITICAL'])
        return code, stdout.getvalue()

    def test_prints_info_hash(self):
        code, output = self._run(self.path)
        self.assertEqual(code, 0)
        self.assertEqual(output.strip(), hashlib.sha1(INFO).hexdigest())

    def test_dump_tree(self):
        code, output = self._run(self.path, '--dump')
        self.assertEqual(code, 0)
        self.assertTrue(output.startswith('Dict:\n    announce:\n'))
        self.assertIn('String: 8, file.bin', output)

    def test_writes_output(self):
        out_path = os.path.join(self.tmp.name, 'out.bin')
        code, _ = self._run(self.path, '--output', out_path)
        self.assertEqual(code, 0)
        with open(out_path, 'rb') as f:
            self.assertEqual(f.read(), INFO)

    def test_output_default_path(self):
        cwd = os.getcwd()
        os.chdir(self.tmp.name)
        self.addCleanup(os.chdir, cwd)
        code, _ = self._run(self.path, '--output')
        self.assertEqual(code, 0)
        self.assertEqual(config.DEFAULT_OUTPUT_PATH, 'out.bin')
        with open(os.path.join(self.tmp.name, 'out.bin'), 'rb') as f:
            self.assertEqual(f.read(), INFO)

    def test_allocation_failure(self):
        with patch('main.sha1', side_effect=AllocationError('no memory')):
            code, output = self._run(self.path)
        self.assertEqual(code, 1)
        self.assertEqual(output, '')

    def test_missing_file(self):
        code, output = self._run(os.path.join(self.tmp.name, 'absent.torrent'))
        self.assertEqual(code, 1)
        self.assertEqual(output, '')

    def test_missing_key(self):
        code, output = self._run(self.path, '--key', 'nothere')
        self.assertEqual(code, 1)
        self.assertEqual(output, '')

    def test_malformed_torrent(self):
        path = self._write('bad.torrent', b'd8:announce14:localhost:80804:infod4:sizei007eee')
        code, output = self._run(path)
        self.assertEqual(code, 1)
        self.assertEqual(output, '')

    def test_root_not_dict(self):
        path = self._write('list.torrent', b'li1ee')
        code, output = self._run(path)
        self.assertEqual(code, 1)
        self.assertEqual(output, '')

if __name__ == '__main__':
    unittest.main()
