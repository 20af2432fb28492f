"""
Write the reduced {contract, abi, bytecode} JSON
"""

import json
import logging
import os
import tempfile
from pathlib import Path

from .models import OutputRecord
from ..utils.exceptions import OutputWriteError

LOG = logging.getLogger(__name__)


def write_output(record: OutputRecord, destination: Path) -> Path:
    """Write record to destination, creating parent directories

    The JSON is written to a temporary file next to the destination and
    renamed over it, so a failure never leaves a half-written file.

    Args:
        record: Contract name, ABI and bytecode
        destination: Absolute output path

    Returns:
        The destination path
    """
    destination = Path(destination)
    tmp_name = None
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{destination.name}.",
                                        suffix=".tmp", dir=str(destination.parent))
        with os.fdopen(fd, 'w') as f:
            json.dump(record.to_dict(), f, indent=2)
            f.write("\n")
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, destination)
        tmp_name = None
    except OSError as e:
        raise OutputWriteError(f"Could not write {destination}: {e}", path=str(destination))
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    LOG.info(f"Wrote {destination}")
    print(f"✅ ABI and bytecode saved to {destination}")
    abi_size = len(record.abi) if isinstance(record.abi, list) else "?"
    print(f"   ABI: {abi_size} entries")
    print(f"   Bytecode: {len(record.bytecode)} characters")
    return destination
