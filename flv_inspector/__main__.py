from flv_inspector.cli import main

raise SystemExit(main())
