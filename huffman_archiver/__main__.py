import sys

from huffman_archiver.main import main

sys.exit(main())
