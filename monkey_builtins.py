"""Builtin functions, consulted only when a name is not bound in any scope."""

from monkey_object import Builtin, Error, Integer, NULL, Object, String


def builtin_len(*args: Object) -> Object:
    if len(args) != 1:
        return Error(f"wrong number of arguments. got={len(args)}, want=1")
    arg = args[0]
    if isinstance(arg, String):
        return Integer(len(arg.value))
    return Error(f"argument to `len` not supported, got {arg.type()}")


def builtin_puts(*args: Object) -> Object:
    """Print each argument on its own line."""
    for arg in args:
        print(arg.inspect())
    return NULL


BUILTINS: dict[str, Builtin] = {
    "len": Builtin(builtin_len),
    "puts": Builtin(builtin_puts),
}


def lookup(name: str) -> Builtin | None:
    return BUILTINS.get(name)
