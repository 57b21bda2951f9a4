# symplace

Building blocks for placing analog blocks under symmetry constraints. The
package has no runtime dependencies beyond the standard library.

## Modules

### `symplace.symmetry`

`SymmetryType` (`VERTICAL`, `HORIZONTAL`) and `SymmetryGroup`.

A `SymmetryGroup(name, symmetry_type=SymmetryType.VERTICAL)` holds symmetry
pairs (`add_symmetry_pair`) and self-symmetric modules
(`add_self_symmetric`). You can query it with `is_in_group`, `in`,
`is_self_symmetric`, `is_symmetry_pair` and `symmetric_pair`. The last of
these returns the partner, or `None`. `change_symmetry_type()` toggles the
orientation.

Given mappings from module name to `(x, y)` positions and `(width, height)`
dimensions, a group can do three things:

- `is_symmetry_island(positions, dimensions)` checks that every module is
  present and that the modules form one edge-connected cluster.
- `validate_symmetric_placement(positions, dimensions)` checks the module
  centres against the axis. It uses `axis_position` if that is set (not
  negative); otherwise it computes the axis from the positions.
- `calculate_axis_position(positions)` averages the pair midpoints (x for
  vertical, y for horizontal). It returns `-1.0` if no pair is placed.

### `symplace.contour`

`ContourSegment(start, end, height)` and `Contour`, a skyline kept as a
sorted list of segments.

- `add_segment(start, end, height)` raises the span to `height`. Segments
  that start inside the span are replaced, and touching neighbours of the
  same height are joined. Empty spans are ignored.
- `height_between(start, end)` returns the highest level over the range, or
  `0` if there is none.
- `merge(other)` interleaves another contour's segments by their start.
- The class also provides `clear()`, `copy()`, `segments`, `is_empty`,
  `max_coordinate` and `max_height`.

### `symplace.adaptive`

`Operation` (`ROTATE`, `MOVE`, `SWAP`, `CHANGE_REP`, `CONVERT_SYM`),
`OperationStats` and `AdaptivePerturbation`.

The perturbation object records attempts and successes for each operation.
You can name an operation by the enum or by its value, such as `"rotate"`.
`update_probabilities()` blends the current probabilities towards ones
weighted by observed improvement, with a minimum probability for each
operation. It then halves the statistics. `probability(op)` returns the
current probability of an operation. `format_stats()` returns a text report.

### `symplace.timeout`

`TimeoutManager(seconds=300, emergency_seconds=10)` and `PlacementTimeout`,
which is a subclass of `RuntimeError`.

- `start_watchdog()` resets the clock and starts a watcher thread. The
  manager also works as a context manager, which starts the watcher on
  entry and stops it on exit.
- When the time runs out, `timed_out` becomes true and `check_timeout()`
  raises `PlacementTimeout`.
- If the manager is not stopped within `emergency_seconds` after that, it
  calls `emergency_callback`. By default this callback terminates the
  process.
- `stop()` stops watching and cancels a pending emergency callback.

### `symplace.parser`

- `parse_input(lines)` and `parse_input_file(path)` return a dict of
  `HardBlock` objects by name and a list of `SymmetryGroup` objects.
- `format_output(blocks, total_area)` and
  `write_output_file(path, blocks, total_area)` render a result. Blocks are
  written in name order.
- Progress messages go to the `logging` module.

### `symplace.annealing`

`Placement` is a protocol that describes what the annealer needs from a
placement representation: `modules`, `symmetry_groups`, `area`,
`wire_length`, `pack()`, `clone()` and the five perturbation methods.

`SimulatedAnnealing(initial_solution, initial_temp=1000.0, final_temp=0.1,
cooling_rate=0.95, iterations=100, no_improvement_limit=1000)` has these
members:

- It packs the initial solution and keeps the best clone seen.
- The cost is `int(area_weight * area + wirelength_weight * wire_length)`.
  The weights are set with `set_cost_weights`.
- Operations are drawn through its `adaptive` (`AdaptivePerturbation`).
- `seed(n)` makes runs reproducible.
- `timeout_manager` can be set to a `TimeoutManager`. The run then stops
  early once the timeout flag is set.
- `run()` returns the best solution found. If a timeout or an error stops
  the run, it still returns the best solution found so far.
- `statistics()` reports `totalIterations`, `acceptedMoves`,
  `rejectedMoves` and `noImprovementCount`.

## Input format

```
NumHardBlocks 3
HardBlock A 4 2
HardBlock B 4 2
HardBlock C 2 2
NumSymGroups 1
SymGroup SG1 3
SymPair A B
SymSelf C
```

Lines that are empty or that start with `/` or `#` are skipped. Unknown
keywords are logged and ignored. `ParseError` (a `ValueError`) is raised in
these cases:

- a field is missing, or a number is not an integer;
- `SymPair` or `SymSelf` appears before any `SymGroup`;
- the declared counts do not match the definitions;
- a symmetry constraint names a block that does not exist.

## Output format

```
Area 48
NumHardBlocks 3
A 0 0 0
B 6 0 1
C 4 0 0
```

Each block line gives the name, x, y, and `1` if the block is rotated or `0`
if it is not.

## Example

```python
from symplace.parser import parse_input_file
from symplace.contour import Contour

blocks, groups = parse_input_file("case.txt")

skyline = Contour()
skyline.add_segment(0, 4, 2)
skyline.add_segment(4, 6, 5)
assert skyline.height_between(3, 5) == 5
```

## What it does not do

The package does not include a placement representation. There is no
B*-tree or hierarchical tree that packs blocks into coordinates. To use
`SimulatedAnnealing`, you supply an object that follows the `Placement`
protocol yourself.

There is also no command-line program. Reading a problem, annealing it and
writing the result is left to the calling code.

## Running the tests

```
pip install .[test]
pytest
```