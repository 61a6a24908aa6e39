# ./src/config.py
import os

# --- General ---
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO') # Example using env var
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# --- Bencode Constants ---
BENCODE_MAX_LOOKAHEAD = 32 # bytes scanned for ':' or 'e' is one less than this
BENCODE_MAX_STRING_SIZE = 100000 # bytes
BENCODE_MAX_DEPTH = 256 # nested lists/dicts, kept under the interpreter recursion limit
BENCODE_INT_MIN = -(2 ** 63)
BENCODE_INT_MAX = 2 ** 63 - 1

BENCODE_DICT_START = b'd'
BENCODE_LIST_START = b'l'
BENCODE_INT_START = b'i'
BENCODE_DELIMITER = b':'
BENCODE_TERMINATOR = b'e'

# --- Tree Dump ---
PRINT_INDENT = 4
PRINT_BLOB_THRESHOLD = 100 # strings this long are shown as <blob>

# --- Torrent ---
INFO_KEY = b'info'
DEFAULT_OUTPUT_PATH = 'out.bin'
