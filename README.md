# dodo-config

`dodo-config` reads backdrop definitions from YAML files. A backdrop describes
a containerised development environment: the image to run or build, the
environment, ports, mounts, the process to start and an optional inline
script.

## Installation

```
pip install .
```

## Configuration files

A configuration file is a YAML document with a `backdrops` mapping. It may pull
in other files with `include`:

```yaml
include:
  - file: other.yaml

backdrops:
  shell:
    image: debian:stable
    aliases: [sh]
    working_dir: '{{ projectRoot }}'
    environment:
      - FOO=BAR
    ports:
      - "8080:80"
    mounts:
      - type: bind
        source: /some/path
        target: /work
        readonly: true
    script: |
      echo "$@"
```

Included file names are opened as given, relative to the working directory,
and are resolved recursively.

Each backdrop may set `name`, `aliases`, `runtime`, `container_name`,
`interpreter` (default `/bin/sh`), `user`, `working_dir`, `capabilities`,
`environment`, `ports`, `mounts`, `image`, `build` and `script`. The older
`volumes` and `devices` keys are still read and added to the mounts.

- `environment` entries are `KEY=VALUE` strings, or maps with `name` and
  `value`.
- `ports` entries are `[[host_ip:]host_port:]container_port[/protocol]`
  strings, or maps with `target`, `publish`, `protocol` and `host_ip`. Quote
  port strings: YAML reads an unquoted `8080:80` as a number.
- `mounts` entries are maps with a `type` of `bind`, `volume`, `tmpfs`,
  `image` or `device`.
- `image` and `build` are either an image name or a map with `name`,
  `context`, `dockerfile`, `steps`, `dependencies`, `arguments`, `secrets`
  and `ssh_agents`.
- `script` is written to a generated `/tmp/dodo-…/entrypoint` path, listed in
  the backdrop's `required_files` and appended to the entrypoint.

### Templates

Every string value (never a key) is rendered as a template before it is read.
Actions are written `{{ ... }}` and may call functions, pass arguments, use
pipes (`|`), parentheses, field access (`.Username`) and `{{-`/`-}}` to trim
whitespace. These functions are available:

- `cwd`, `env KEY`, `user`, `currentFile`, `currentDir`
- `sh COMMAND` — output of `/bin/sh -c COMMAND`
- `readFile PATH` — a file relative to the current file's directory
- `projectRoot`, `projectPath` — the nearest directory holding `.git`, and the
  working directory relative to it
- `trim`, `upper`, `lower`, `title`, `trimPrefix`, `trimSuffix`, `replace`,
  `default`, `quote`, `squote`, `base`, `dir`, `clean`

## Command line

List every backdrop found in the default configuration files (`dodo.yaml`,
`dodo.yml`, `.dodo.yaml` or `.dodo.yml` in the working directory and every
directory above it):

```
dodo-config list
```

Check one or more files for errors; it prints `configuration is valid!` or the
errors found:

```
dodo-config validate dodo.yaml
```

## Library use

```python
from dodo_config.config import BackdropLoadError, get_all_backdrops
from dodo_config.configuration import Configuration

backdrops = get_all_backdrops("dodo.yaml")
shell = backdrops["shell"]
print(shell.container_config.image)

config = Configuration()
print(config.get_backdrop("sh").name)
```

`get_all_backdrops` raises `BackdropLoadError` when a file can't be read or
holds an invalid backdrop; its `errors` lists the failures and its `backdrops`
holds what was loaded anyway. `Configuration.get_backdrop` looks a backdrop up
by its name or by one of its aliases and raises `KeyError` when none matches;
`Configuration.list_backdrops` returns them all. The data types live in
`dodo_config.models`.

## What it does not do

The package only reads configuration. It does not build images or run
containers, and it does not serve backdrops to any other program. Files are
not checked against a schema: only the keys listed above are read and
type-checked, and anything else is ignored. The template language covers
single actions and pipelines only; there are no `if`, `range` or other
control structures.

## Tests

```
pip install .[test]
pytest
```