# atlasopt

A command-line tool that sets up a Rust project for faster builds and gives
you shortcuts for everyday cargo work.

It can:

- write an optimized `.cargo/config.toml` for your platform (parallel jobs,
  incremental builds, target CPU, fast linker flags, sparse registry protocol)
- append tuned `[profile.*]` sections to `Cargo.toml`
- create a `scripts/fast-build.sh` helper script
- install helper tools such as `sccache`, `cargo-nextest`, `cargo-udeps`,
  `cargo-hakari`, `cargo-watch` and a platform linker (`mold`, `zld`, `lld`)
  through `brew`, `apt-get`, `yum`, `pacman`, `winget` or `cargo install`
- run check, build, test and clean, timed and with optional statistics
- report which tools are installed, as text or as JSON
- keep its own settings in a TOML file in your user configuration directory

## Installation

```
pip install atlasopt
```

This installs two equivalent commands, `atlasopt` and `atlas`. The hints the
tool prints use the name `atlas`.

For running the test suite:

```
pip install "atlasopt[test]"
pytest
```

## Usage

Run the commands from inside a Rust project (any directory at or below a
`Cargo.toml`), or point at one with `--project-dir`.

```
atlasopt init                  # configure the project and install tools
atlasopt init --no-tools --no-backup --force

atlasopt tools --list          # show known tools, install state and platform support
atlasopt tools --only sccache,cargo-nextest

atlasopt build check --stats
atlasopt build build --release
atlasopt build test            # uses cargo-nextest when installed
atlasopt build clean           # removes target/debug/deps/*.rlib only
atlasopt build clean --all     # cargo clean plus target/rust-analyzer

atlasopt dev quick-check
atlasopt dev watch
atlasopt dev profile
atlasopt dev clean-build --release

atlasopt optimize --all
atlasopt status --detailed
atlasopt status --json

atlasopt config show
atlasopt config edit           # opens the file in $EDITOR
atlasopt config validate
atlasopt config export --output atlas.toml
atlasopt config reset --force

atlasopt update --check
atlasopt --version
```

`init` and `install-tools` also answer to their long names
(`initialize`, `install-tools`), and `dev` to `development`. The global
options `--verbose`, `--quiet` and `--project-dir DIR` work before or after
any command. The command exits with status 1 and prints the error when an
operation fails.

Before overwriting an existing `.cargo/config.toml` or adding profiles to a
`Cargo.toml` that already has `[profile.dev]`, `init` asks for confirmation
unless `--force` is given; unless `--no-backup` is given it first copies both
files to `*.toml.backup`.

## Configuration

The settings file is `config.toml` in the `atlas` folder of your user
configuration directory. `atlasopt config show` prints the values in effect;
when no file exists, the defaults are used, and `init` writes the defaults
there. Validation rejects zero or more than 64 parallel jobs, artifact
retention above 365 days, and tool install timeouts under 30 seconds; watch
paths that do not exist only produce a warning.

## Library use

The building blocks can be imported too:

- `atlasopt.config.OptimizerConfig` – load, save, validate and serialize the
  settings (`load_or_default`, `load_from_file`, `save_to_file`, `to_toml`,
  `from_dict`, `to_dict`, `validate`, `effective_parallel_jobs`)
- `atlasopt.config.generate_cargo_config` and `generate_cargo_profiles`
- `atlasopt.system.SystemInfo.detect()` – operating system, architecture,
  CPU count, rustc and cargo versions and installed tools
- `atlasopt.utils` – helpers such as `format_bytes`, `format_duration`,
  `find_rust_project_root`, `get_directory_size` and `clean_old_files`
- `atlasopt.errors.OptimizerError` and its subclasses, with
  `is_recoverable()` and `user_message()`
- `atlasopt.cli.main(argv)` – the command line, returning an exit status

## Limitations

- `optimize --clean` and `optimize --benchmark` only report completion; they
  neither remove artifacts nor run benchmarks. `optimize --deps` runs
  `cargo +nightly udeps` when `cargo-udeps` is installed.
- `update --check` does not contact any server; it always reports that the
  current version is the latest. `update` without `--check` runs
  `cargo install atlas --force`.
- `dev watch --paths`, `dev profile --detailed` and `build test --changed`
  are accepted but have no effect.
- The `dev` commands run cargo in the current directory, not in the one given
  by `--project-dir`.