
from .spore_strip import (
    spore_strip
)

from .fitness_strip import (
    fitness_strip
)

from .residual_qq import (
    residual_qq
)
