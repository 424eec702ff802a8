import tempfile, yaml, json, os
from typing import Any, Optional, Union
from pathlib import Path
from tasktrack.recovery import CorruptionError, FatalError, FileOperationError
from tasktrack.logs import get_logger

log = get_logger("io")

DATA_YAML = 0
DATA_JSON = 1

def _cleanup(temp_path: Optional[str]):
    """Remove a leftover temporary file after a failed write."""
    if temp_path is None or not os.path.exists(temp_path):
        return
    try:
        os.unlink(temp_path)
        log.debug(f"Cleaned up temporary file: {temp_path}")
    except OSError as cleanup_error:
        # Don't raise while handling another error, just log
        log.warning(f"Could not clean up temp file {temp_path}: {cleanup_error}")

def _create_dirs(file_path : Path):
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
    except (OSError, PermissionError) as e:
        error_msg = f"Cannot create directory {file_path.parent}: {e}"
        log.error(error_msg)
        raise FileOperationError(error_msg) from e

def encode(data_type : int, data : Any) -> bytes:
    """
    Serialize plain data (dicts, lists, strings, numbers) to bytes.

    Raises:
        CorruptionError: If the data cannot be represented in the format.
        FatalError: If the format is unknown.
    """
    try:
        if data_type == DATA_YAML:
            text = yaml.safe_dump(data, default_flow_style=False, sort_keys=False, indent=2, allow_unicode=True)
        elif data_type == DATA_JSON:
            text = json.dumps(data, indent=2, ensure_ascii=False)
        else:
            raise FatalError("Unsupported Data Format")
    except (yaml.YAMLError, TypeError, ValueError) as e:
        error_msg = (f"Data serialization failed. "
                     f"In-memory data may contain non-serializable types: {e}")
        log.error(error_msg)
        raise CorruptionError(error_msg) from e
    return text.encode('utf-8')

def decode(data_type : int, payload : bytes) -> Any:
    """
    Parse bytes produced by :func:`encode`.

    Raises:
        CorruptionError: If the payload is not valid in the format.
        FatalError: If the format is unknown.
    """
    if data_type not in (DATA_YAML, DATA_JSON):
        raise FatalError("Unsupported Data Format")
    try:
        text = payload.decode('utf-8')
        if data_type == DATA_YAML:
            return yaml.safe_load(text)
        return json.loads(text)
    except UnicodeDecodeError as e:
        raise CorruptionError(f"Data is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise CorruptionError(f"JSON syntax error: {e}") from e
    except yaml.YAMLError as e:
        raise CorruptionError(f"YAML syntax error: {e}") from e
    except (ValueError, RecursionError) as e:
        # Oversized integers and nesting deeper than the parser can follow
        raise CorruptionError(f"Data cannot be parsed: {e}") from e

def atomic_write(file_path : Union[Path, str], payload : bytes, create_dirs : bool = False):
    """
    Write bytes to a file using atomic updates.

    The payload goes to a temporary file next to the target which then
    replaces the target, so readers see either the old or the new content.
    """
    file_path = Path(file_path)
    temp_path = None

    try:
        if create_dirs:
            _create_dirs(file_path)

        # Create temporary file in the same directory as target for atomicity
        with tempfile.NamedTemporaryFile(mode='wb', dir=file_path.parent, prefix=f".{file_path.name}.", suffix='.tmp', delete=False) as temp_file:
            temp_path = temp_file.name
            temp_file.write(payload)
            temp_file.flush()
            os.fsync(temp_file.fileno())

        # Atomic replace - this either completely succeeds or completely fails
        os.replace(temp_path, file_path)
        log.debug(f"Successfully saved file: {file_path}")
        return True

    except (IOError, OSError, PermissionError) as e:
        _cleanup(temp_path)
        error_msg = f"I/O error saving file {file_path}: {e}"
        log.error(error_msg)
        raise FileOperationError(error_msg) from e

def read_bytes(file_path : Union[Path, str]) -> Union[None, bytes]:
    """
    Read a whole file.

    Returns:
        The file content, or None if the file doesn't exist
    """
    file_path = Path(file_path)
    if not file_path.exists():
        return None

    try:
        return file_path.read_bytes()
    except (IOError, OSError, PermissionError) as e:
        # I/O errors are recoverable
        raise FileOperationError(f"Failed to read file {file_path}: {e}") from e
