VALUE = 42
