# ibkit

Python helpers for working with the artefacts of static analysis of iOS and
macOS Mach-O binaries:

- reading and writing method-chain databases (`ibkit.method_chain`)
- loading symbol-wrapper reports (`ibkit.symbol_wrapper`)
- collecting Objective-C reflection calls and writing them as JSON (`ibkit.reflection`)
- detecting thin and fat Mach-O headers and picking the arm64 slice (`ibkit.macho_header`)
- error codes and the `ScannerError` exception (`ibkit.errors`)
- a scratch work directory under `/tmp/` for shadow copies of binaries (`ibkit.workdir`)
- a first-in first-out queue of program states that skips already seen pcs (`ibkit.program_state`)
- small string helpers (`ibkit.strutil`)

The package has no dependencies outside the standard library.

## Install

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Method-chain databases

A method-chain database is a text file whose first line names the format
version (`iblessing methodchains,ver:0.2;`), whose second line lists the
columns, and whose remaining lines hold one method each with the chain ids
and call-site addresses of its callers and callees.

```python
from ibkit.method_chain import load_method_chain, store_method_chain, detect_version

print(detect_version("app_method-xrefs.iblessing.txt"))   # "0.2", or None
sel2chain = load_method_chain("app_method-xrefs.iblessing.txt")
for sel, chain in sel2chain.items():
    print(sel, chain.prefix, chain.class_name, chain.method_name, hex(chain.imp_addr))
    for caller, call_site in chain.prev_methods:
        print("  called from", caller.class_name, caller.method_name, hex(call_site))
store_method_chain("copy.txt", sel2chain)
```

`load_method_chain` returns a dict sorted by selector, with `prev_methods`
and `next_methods` linked to the other `MethodChain` objects. A database of
another format version raises `VersionMismatchError`. Malformed lines and
links to unknown chain ids are skipped and reported through the `logging`
module.

## Symbol-wrapper reports

```python
from ibkit.symbol_wrapper import detect_report_version, load_wrapper_infos

print(detect_report_version("app_symbol-wrappers.iblessing.txt"))  # "0.1", or None
for info in load_wrapper_infos("app_symbol-wrappers.iblessing.txt"):
    print(hex(info.address), info.name, info.prototype)
```

Reports of another format version raise `VersionMismatchError`; lines that
do not have four `;`-separated columns are skipped.

## Reflection reports

```python
from ibkit.reflection import ReflectionCall, ReflectionCallArg, ReflectionInfoManager

manager = ReflectionInfoManager()
call = ReflectionCall(pc=0x100004000, args=[ReflectionCallArg("NSString", "MyClass", True)], resolved=True)
manager.info.add_call("NSClassFromString", call)
print(manager.to_json())
manager.sync_to_disk("reflection.json")
```

Calls are grouped by name with their total and resolved counts. A call whose
pc is in `manager.info.visited_pc` is not recorded. Strings holding
characters outside printable ASCII are written as `<<unprintable>>`.
`sync_to_disk()` without a path writes to `manager.report_path`.

## Mach-O headers

```python
from ibkit.macho_header import detect_header, detect_header_in_file
from ibkit.errors import ScannerError

try:
    image, header = detect_header_in_file("MyApp")
except ScannerError as exc:
    print(exc.code, exc)
else:
    print(hex(header.magic), header.ncmds, header.offset, header.size, len(image))
```

`detect_header(data)` does the same on bytes already in memory. For a fat
binary the arm64 slice is chosen and `HeaderInfo.offset` and `size` locate
it; for a thin binary the offset is 0. Static archives raise `ScannerError`
with `ScannerErrorCode.NEED_ARCHIVE_NOLIPO`, fat archives with
`NEED_ARCHIVE_LIPO`, and inputs without an arm64 image or with an unknown
magic with `UNSUPPORT_ARCH`.

## Work directory and program states

```python
from ibkit.workdir import WorkDirManager
from ibkit.program_state import ProgramState, ProgramStateManager

work = WorkDirManager("/tmp/ibkit-workdir")   # paths outside /tmp/ fall back to /tmp/
work.reset()
shadow = work.create_shadow_file("MyApp")
print(work.find_object_files(exclude={"MyApp"}))

states = ProgramStateManager()
states.enqueue(ProgramState(pc=0x100004000))   # True
states.enqueue(ProgramState(pc=0x100004000))   # False, pc already seen
print(states.pop(), states.is_empty())
```

## What the package does not do

There is no command-line tool and no scanner. The package does not parse
load commands, symbol or string tables, does not disassemble or emulate
code, does not thin or unpack static libraries, and does not produce
method-chain or symbol-wrapper data from a binary; it only reads and
writes such data. Symbol-wrapper reports can be read but not written.