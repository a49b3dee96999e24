import sys

from inheritance_sandbox.cli import main

sys.exit(main())
