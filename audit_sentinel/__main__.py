import sys

from audit_sentinel.cli import main

sys.exit(main())
