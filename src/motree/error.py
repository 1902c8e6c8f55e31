"motree.error brings custom exceptions."


class EmptyTreeError(Exception):
    # delete on an empty tree will raise this
    # (only in strict mode, otherwise it is just logged)
    pass


class KeyNotFoundError(Exception):
    # delete or search will raise this
    pass


class DuplicateKeyError(Exception):
    # strict insert will raise this
    pass


class InvalidOrderError(Exception):
    # raised by BTree.__init__ when the order is too small
    pass


class LevelNotFoundError(Exception):
    # raised by .level when the asked level
    # is outside [0, height]
    pass


class InvalidParentError(Exception):
    # raised by NAryTree.add when there is no parent
    # to attach the new node to
    pass


class TreeCorruptedError(Exception):
    # raised by BTree.check
    # , should never happen after a public operation.
    pass
