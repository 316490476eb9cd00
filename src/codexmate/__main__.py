# Allows `python -m codexmate`
import sys

from codexmate.cli import main

sys.exit(main())
