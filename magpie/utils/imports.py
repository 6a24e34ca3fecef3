def import_string(key):
    """
    Imports the object a dotted path points at.

    >>> import_string('magpie.processors.SanitizeDataProcessor')
    <class 'magpie.processors.SanitizeDataProcessor'>
    """
    if '.' not in key:
        return __import__(key)

    module_name, class_name = key.rsplit('.', 1)
    module = __import__(module_name, {}, {}, [class_name], 0)
    return getattr(module, class_name)
