import sys

from a11y_shell.app import main

sys.exit(main())
