import threading


class _Singleton(type):
    """
    A metaclass that creates a Singleton base class when called.
    The instance is identified by the class and the arguments passed to it, so
    ReadStatusStore("/a.json") and ReadStatusStore("/b.json") are two instances.
    Creation is guarded by a lock: threads racing on the first call get the same instance.
    @reference: https://stackoverflow.com/questions/6760685/what-is-the-best-way-of-implementing-singleton-in-python
    """

    _instances = {}
    _lock = threading.RLock()

    def __call__(clazz, *args, **kwargs):
        key = args + tuple(sorted(kwargs.items()))
        instances = clazz._instances.get(clazz, {})
        if key in instances:
            return instances[key]

        with _Singleton._lock:
            instances = clazz._instances.setdefault(clazz, {})
            if key not in instances:
                instances[key] = super(_Singleton, clazz).__call__(*args, **kwargs)
            return instances[key]

    def clear_instances(clazz):
        """Forget every cached instance of this class"""
        with _Singleton._lock:
            clazz._instances.pop(clazz, None)


class Singleton(_Singleton('SingletonMeta', (object,), {})):
    pass
