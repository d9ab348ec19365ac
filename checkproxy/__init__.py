# The MIT License (MIT)
# Copyright © 2025 Entrius

__version__ = '0.3.0'
