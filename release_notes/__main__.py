import sys

import release_notes.cli

sys.exit(release_notes.cli.main())
