from securethis.cli import main

raise SystemExit(main())
