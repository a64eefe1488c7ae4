import sys

from photoreel.cli import main

sys.exit(main())
