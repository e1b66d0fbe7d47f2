import tempfile, yaml, json, os
from typing import Union, Dict, Any, Type
from pathlib import Path
from tasktrack.recovery import FileOperationError, FatalError, CorruptionError
from tasktrack.logs import get_logger
from tasktrack.models import BaseRecordModel

log = get_logger("io")

DATA_JSON = 1
DATA_TEXT = 2

def _cleanup(temp_path):
    # Remove the temporary file left behind by a failed write
    if temp_path is not None and os.path.exists(temp_path):
        try:
            os.unlink(temp_path)
            log.debug(f"Cleaned up temporary file: {temp_path}")
        except OSError as cleanup_error:
            log.warning(f"Could not clean up temp file {temp_path}: {cleanup_error}")

def _create_dirs(file_path : Path):
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
    except (OSError, PermissionError) as e:
        error_msg = f"Cannot create directory {file_path.parent}: {e}"
        log.error(error_msg)
        raise FileOperationError(error_msg) from e

def atomic_write(data_type : int, file_path : Union[Path, str], data : Union[Dict[str, Any], str], create_dirs : bool = False):
    """
    Serialize and save data to a file using atomic updates.

    The data is written to a temporary file next to the target, flushed to
    disk, then moved over the target with os.replace, so readers see either
    the old or the new content and never a partial file.
    """
    file_path = Path(file_path)
    temp_path = None

    try:
        if create_dirs:
            _create_dirs(file_path)

        # Create temporary file in the same directory as target for atomicity
        with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', dir=file_path.parent, prefix=f".{file_path.name}.", suffix='.tmp', delete=False) as temp_file:
            temp_path = temp_file.name
            if data_type == DATA_JSON:
                json.dump(data, temp_file, indent=2, ensure_ascii=False)
                temp_file.write("\n")
            elif data_type == DATA_TEXT:
                temp_file.write(data)
            else:
                raise FatalError("Unsupported Data Format")
            temp_file.flush()
            os.fsync(temp_file.fileno())

        # Atomic replace - this either completely succeeds or completely fails
        os.replace(temp_path, file_path)
        log.debug(f"Successfully saved file: {file_path}")
        return True

    except FatalError:
        _cleanup(temp_path)
        raise

    except (TypeError, ValueError) as e:
        _cleanup(temp_path)
        # FATAL ERROR: Data cannot be serialized
        error_msg = (f"Data serialization failed for {file_path}. "
                    f"In-memory data may be corrupt or contain non-serializable types: {e}")
        log.critical(error_msg)
        raise FatalError(error_msg) from e

    except OSError as e:
        _cleanup(temp_path)
        # RECOVERABLE ERROR: I/O issues
        error_msg = f"I/O error saving file {file_path}: {e}"
        log.error(error_msg)
        raise FileOperationError(error_msg) from e

def load_model(model_type : Type[BaseRecordModel], file_path : Union[Path, str]) -> Union[None, BaseRecordModel]:
    """
    Load and parse a JSON record into a model.

    Args:
        model_type: The model class to validate the record against
        file_path: Path to the JSON file

    Returns:
        The parsed model, or None if the file doesn't exist

    Raises:
        CorruptionError: The file is not valid JSON or does not match the model
        FileOperationError: The file exists but could not be read
    """
    file_path = Path(file_path)
    if not file_path.exists():
        return None

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return model_type.from_json(f.read())

    except ValueError as e:
        # Syntax or shape errors mean the record on disk is corrupted
        raise CorruptionError(f"Malformed record in {file_path}: {e}") from e
    except FileNotFoundError:
        # Removed between the exists() check and the open
        return None
    except OSError as e:
        raise FileOperationError(f"Failed to read file {file_path}: {e}") from e

def load_yaml_file(file_path : Union[Path, str]) -> Union[None, Dict]:
    """
    Load and parse a YAML file.

    Args:
        file_path: Path to the YAML file

    Returns:
        Parsed data as dict, or None if file doesn't exist
    """
    file_path = Path(file_path)
    if not file_path.exists():
        return None

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}

            # Basic sanity check for data corruption
            if not isinstance(data, dict):
                raise CorruptionError(f"File {file_path} contains invalid data structure")

            return data

    except yaml.YAMLError as e:
        raise CorruptionError(f"YAML syntax error in {file_path}: {e}") from e
    except OSError as e:
        raise FileOperationError(f"Failed to read file {file_path}: {e}") from e
