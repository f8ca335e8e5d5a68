# trackmon

`trackmon` watches a video tracker that sits on the PCI bus and shares a
block of memory with the host. It enables the device, maps its memory,
sends ping commands, decodes the tracker's status messages and writes
them to a CSV log. It includes a small Tk window, and you can also use it
as a library.

## Requirements

- Linux with `/dev/mem` available. Using it usually requires root.
- The `setpci` tool. `trackmon` runs it to enable memory access on the
  device (`setpci -s <bus>:<slot>.<func> 04.w=0142`).
- Python 3.10 or newer, with Tk support (`tkinter`). Some distributions
  ship Tk as a separate package.

No third-party Python packages are needed.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## The monitor window

```
trackmon
```

This opens the monitor window. The command takes no options apart from
`--help`.

- **Initialize** enables PCI device 98:00.0 and maps 0x800 bytes of
  memory at physical address 0xDBA00000. It then clears the command,
  status and query-response mailboxes.
- **Ping** sends a ping command and waits for the tracker to clear the
  command mailbox. It polls every 100 ms and gives up after 100 polls.
- **Automatic Poll** reads any pending status message, then schedules the
  next read 4 ms later.
- **Start Logging** / **Stop Logging** ask for a file name and then write
  each status message that is read to that CSV file.

These controls appear both as buttons and in the File and Tracker menus.
Ping, Start Logging and Automatic Poll stay disabled until initialization
succeeds. When an operation fails, the status line shows what went wrong
and an error dialog opens.

Each decoded message fills these fields:

- raw and filtered track errors, to three decimals;
- track state, track mode, target polarity and status flags, as text;
- target size, left and top position, and pixel count;
- mount azimuth and elevation, to four decimals.

## Using it as a library

```python
from trackmon.trackermemory import TrackerMemory, TrackerError
from trackmon.logger import TrackLogger

with TrackerMemory() as memory, TrackLogger() as log:
    memory.initialize(0xDBA00000, 0x0800, 0x98, 0x00, 0x00)
    memory.send_ping()
    log.start("track.csv")
    data = memory.read_status_data()
    if data is not None:
        print(data.state_string(), data.mode_string(), data.status_string())
        print(data.azimuth_degrees(), data.elevation_degrees())
        log.log(data)
```

`TrackerMemory` has these members:

- `initialize(base_address, mem_size, pci_bus, pci_slot, pci_func)`.
  Every argument has a default, and the defaults are the values listed
  above.
- `send_ping()`
- `read_status_data()`. It returns a `TrackData`, or `None` when no new
  message is waiting.
- `is_ready_for_command()`
- `read_word(offset)` and `write_word(offset, value)`. These access raw
  16-bit words. Reads return 0 and writes do nothing when the memory is
  not initialized or the offset is out of range.
- `cleanup()`
- the `initialized` property.

The constructor takes three optional arguments:

- `device`, the memory device path. The default is `/dev/mem`.
- `run_command`, a callable that receives the `setpci` argument list and
  returns its exit status.
- `sleep`, the delay function.

Failures raise `TrackerError`. This covers:

- a failed `setpci`;
- a device that cannot be opened or mapped;
- use before initialization;
- a tracker that is not ready for a command;
- a ping timeout;
- a status message with a bad sync word or message type.

`TrackLogger` writes CSV files. Its members are:

- `start(filename)`. It closes any file that is already open, and raises
  `OSError` if the new file cannot be opened.
- `log(data)`
- `stop()`
- the `is_logging` property.

`TrackLogger` also works as a context manager. The constructor takes an
optional `clock` callable that supplies row timestamps.
`format_row(data, timestamp)` builds a single row without writing it.

`TrackerMonitor` in `trackmon.controller` ties a `TrackerMemory` and a
`TrackLogger` together. It offers `initialize()`, `ping()`,
`start_logging(filename)`, `stop_logging()`, `poll()` and `close()`.
Each operation sets `status` to a one-line summary of what happened.
Errors are re-raised after `status` has been set. `poll()` logs the
message it reads when a log file is open. The window is built on top of
this class.

### Decoding without hardware

`TrackData.from_words` decodes the 18 sixteen-bit words of a status
message. Track errors are signed values in units of 1/32 pixel. Azimuth
and elevation are signed 32-bit counts in units of 1/10000.
`azimuth_degrees()` and `elevation_degrees()` divide these counts by
10000 in single precision.

The raw codes are also available as enums and flags:

- `TargetPolarity`
- `TrackState`
- `TrackMode`
- `StatusFlag`

`format_fields(data)` in `trackmon.gui` returns the display text for
each field.

`calculate_checksum(words)` computes the checksum that command messages
carry: the two's complement of the byte sum. `ping_message()` returns
the three words of a ping command. `pci_address(bus, slot, func)`
formats a PCI location in the form `setpci` expects.

## Log format

The first time a message is logged, the file gets this header line:

```
Timestamp,RawErrorX,RawErrorY,FilteredErrorX,FilteredErrorY,TrackState,TrackMode,TargetPolarity,Status,TargetSizeX,TargetSizeY,TargetLeft,TargetTop,TargetPixelCount,Azimuth,Elevation
```

After the header comes one row per status message:

- Each row starts with a local-time timestamp in the form
  `YYYY-MM-DDTHH:MM:SS`.
- Numbers are written with up to six significant digits.
- States, modes, polarity and status flags are written as text, for
  example `On Track`, `Centroid`, `White` or `OK`.

Fields are not quoted. When several status flags are set, the Status
text joins them with `, `, so that row has more comma-separated columns
than the header.