import sys

from healthreporter.cli import main

sys.exit(main())
