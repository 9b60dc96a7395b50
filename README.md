# elava

Elava compares the cloud resources that exist with the resources your
configuration says should exist, decides what to do about each difference,
records what happened in an append-only log, and points out resources that
nobody appears to own or manage.

## What is in the package

- `elava.tags`: `Tags`, a typed set of resource tags (`elava_owner`,
  `elava_managed`, `elava_blessed`, `environment`, `team`, `project`, ...).
  `Tags.to_map()` gives the flat provider-style map (`"elava:owner"`,
  `"Name"`, `"Environment"`, ...), `tags_from_map()` reads one back, and
  `Tags.get(key)` looks a tag up by provider key or by a short alias such as
  `"team"` or `"elava_owner"`. `to_dict()` / `tags_from_dict()` give a
  JSON-ready form.
- `elava.resource`: `Resource`, `ResourceSpec` and `ResourceFilter`.
  `Resource.matches(filter)` checks type, region, provider, id list, owner and
  the managed flag; empty criteria match everything. `Resource.to_dict()` and
  `resource_from_dict()` convert to and from JSON-ready dictionaries.
- `elava.decision`: `Decision` and the `Action` enum (`create`, `update`,
  `delete`, `terminate`, `notify`, `tag`, `noop`). `Decision.validate()`
  raises `DecisionValidationError` when the action or reason is empty, or when
  a non-create decision has no resource id. `is_destructive()` is true for
  delete and terminate; `requires_confirmation()` also holds for blessed
  resources.
- `elava.reconcile_types`: `Config`, `Diff`, `DiffType`, `Claim`,
  `ReconcileResult`, `ReconcilerOptions`, and the `Observer`, `Comparator`,
  `DecisionMaker` and `Coordinator` protocols.
- `elava.comparator`: `SimpleComparator.compare(current, desired)` yields
  `Diff`s of type missing (desired but not found), unwanted (found, managed,
  not desired), unmanaged (found, not managed, not desired) and drifted (type,
  provider, region, or management/environment/team/project tags differ).
- `elava.decision_maker`: `SimpleDecisionMaker(skip_destructive=False)` turns
  diffs into decisions: missing → create, drifted → update, unmanaged →
  notify, unwanted → delete, or notify when the resource is blessed or
  destructive actions are skipped. Malformed diffs raise `DecisionError`.
- `elava.wal`: `WAL(directory)` writes one JSON line per event to a file named
  `elava-YYYYmmdd-HHMMSS.wal`, with increasing sequence numbers and an fsync
  after every entry. `append()` and `append_error()` return the written
  `Entry`. `WALReader(path)` iterates over a file's entries; `wal_files()`
  lists log files and `replay(directory, since, handler)` passes every entry
  newer than `since` to `handler` and returns how many it passed.
- `elava.tracker`: `Tracker` applies `TrackingRule`s (by default: no owner or
  team, no project or name, no infrastructure-as-code markers, stopped or
  terminated for more than seven days) and reports `UntrackedResource`s with
  their issues, a risk level and a suggested action. `scan_for_untracked()`
  uses the default rules.

## Installation

```
pip install .
```

Running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from elava.resource import Resource
from elava.tags import Tags
from elava.comparator import SimpleComparator
from elava.decision_maker import SimpleDecisionMaker

current = [Resource(id="i-1", type="ec2", provider="aws",
                    tags=Tags(elava_managed=True, environment="prod"))]
desired = [Resource(id="i-1", type="ec2", provider="aws",
                    tags=Tags(elava_managed=True, environment="staging"))]

diffs = SimpleComparator().compare(current, desired)
decisions = SimpleDecisionMaker(skip_destructive=True).decide(diffs)
for decision in decisions:
    print(decision.action, decision.resource_id, decision.reason)
# update i-1 Resource configuration differs from desired state
```

Logging decisions and reading them back:

```python
from datetime import datetime, timezone
from elava.wal import WAL, EntryType, replay

start = datetime.now(timezone.utc)
with WAL("/tmp/elava-log") as log:
    for decision in decisions:
        log.append(EntryType.DECIDED, decision.resource_id, decision)

replay("/tmp/elava-log", start, lambda entry: print(entry.sequence, entry.type, entry.data))
```

Finding untracked resources:

```python
from elava.tracker import scan_for_untracked

for item in scan_for_untracked(current):
    print(item.resource.id, item.risk, item.action, item.issues)
```

Blessed resources (`Tags(elava_blessed=True)`) are never scheduled for
deletion; the decision maker only asks for a notification.

## What the package does not do

- It does not talk to any cloud provider. Resources come from whatever you
  supply, for example an object that satisfies the `Observer` protocol.
- It has no persistent, revisioned store of observations. Observations live
  only as the `Resource` objects you hold, or as entries you write to the log.
- It has no engine that runs a full cycle for you. You call the comparator and
  decision maker yourself and log the results with `WAL`.
- It defines the `Coordinator` protocol and the `Claim` record, but ships no
  implementation that stores or enforces claims between instances.
- It carries out no decisions: it decides and records, it does not create,
  update or delete anything.
- It has no command-line program.