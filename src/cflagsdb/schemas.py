from pydantic import BaseModel, ConfigDict


class Record(BaseModel):
    """
    One file's recorded build flags.

    A read-only view: built per inserted file and per delivered query row,
    never held by the store itself.
    """
    model_config = ConfigDict(frozen=True)

    directory: str
    file: str
    flags: str


class StoreStats(BaseModel):
    """
    Summary of a flags database.
    """
    total_records: int
    total_directories: int
    db_size_bytes: int
