# pd2mm

pd2mm is a mod manager driven by JSON (or JSONC) configuration files. For each
entry in a configuration it cleans the extract directory, unpacks the zip
archives found in the mods directory into it, cleans the output directory and
then copies the files it recognises (by the configured `expects` rules) into
the output directory. If an export path is set, the output is copied there too.

## Installation

```
pip install .
```

## Usage

Run the manager from the directory that holds your `pd2mm/` folder:

```
pd2mm
```

If `pd2mm/pd2.json` does not exist, a default configuration is written there
first. Options:

- `-config <path>`: use this one configuration file. Without it, every
  `.json` and `.jsonc` file directly inside `pd2mm/` is used. Passing an empty
  value is an error. Files that cannot be read or parsed are skipped.
- `-version`: log version information and exit.

Progress is logged to the console and appended to `pd2mm_log.txt` in the
current directory. The display language follows the user's locale; English
and Chinese are known (Chinese currently uses the English strings).

Each archive in a mods directory is unpacked into a folder named after the
archive (without its extension) inside the extract directory.

### Configuration

A configuration holds a list of `mods` entries. Each entry names:

- `mods`: the directory holding the mod archives,
- `extract`, `output`, `export`: objects with a `path` and an `excludeClean`
  list of paths that are kept when that directory is cleaned,
- `expects`: paths such as `mod.txt` or `main.xml` that mark the root of a mod,
  with optional `require`, `exclusive` and `base` settings,
- `include`, `exclude`, `copy`, `rename`: extra copy, skip and rename rules.

Strings may refer to `{path}`, `{output}`, `{extract}` and `{export}`, which
are replaced with the entry's own directories. Comments and trailing commas are
accepted in configuration files.

### Comparing folders

To check two directory trees for differing files by MD5 checksum:

```
pd2mm-diff <folder1> <folder2>
```

Files present in only one folder, and files whose contents differ, are listed.

## Library use

```python
from pd2mm import config, diff

cfg = config.default()
config.write("pd2mm/pd2.json", cfg)
loaded = config.read("pd2mm/pd2.json")

for line in diff.diff_folders("a", "b"):
    print(line)
```

Other modules offer the pieces on their own: `pd2mm.ziputil` (`zip_directory`,
`unzip`), `pd2mm.cleaner` (`Cleaner`, `clean_path`), `pd2mm.core` (`process`)
and `pd2mm.runner` (`Runner`, `run_with_error`).

## What it does not do

- Only zip archives are unpacked. Any other file in a mods directory, such as
  a 7z or rar archive, stops the run for that configuration with an error.
- There is no graphical window; the package is used from the command line or
  as a library.
- The `clean_extract`, `clean_export` and `clean_output` settings of `Flags`
  are not exposed as command-line options.

## Running the tests

```
pip install .[test]
pytest
```