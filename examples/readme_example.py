from dataclasses import dataclass

from ccopy import Config, tagged


@dataclass
class T:
    a: int
    name: str = tagged("anonymise_name")


def anonymise_name(name: str) -> str:
    """Receives the tagged field's value, returns the value the copy gets."""
    return "john doe"


if __name__ == "__main__":
    obj = T(a=2, name="Secret name")

    config = Config(anonymise_name=anonymise_name)
    obj_copy = config.copy(obj)

    print(obj_copy)
    # T(a=2, name='john doe')
