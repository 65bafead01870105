import sys

from contract_atlas.cli import main

sys.exit(main())
