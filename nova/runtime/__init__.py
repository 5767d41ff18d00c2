from .environment import Binding, Environment
from .evaluator import Evaluator
from .values import Builtin, Function, Value, format_value, type_name
