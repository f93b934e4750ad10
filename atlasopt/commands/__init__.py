"""Subcommands: init, install-tools, build, dev, optimize, status, config and update."""