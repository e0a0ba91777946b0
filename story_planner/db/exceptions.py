class StorageCorruptedError(RuntimeError):
    """Файл хранилища не читается как документ ни в одном известном формате"""
