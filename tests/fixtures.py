from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Protocol


class Service:
    def __init__(self):
        self.value = None


class ServiceTwo:
    pass


class ServiceThree:
    pass


class NoConstructor:
    pass


class ConstructorWithClasses:
    def __init__(self, service1: Service, service2: ServiceTwo, service3: ServiceThree):
        self.service1 = service1
        self.service2 = service2
        self.service3 = service3


class PrimitiveConstructor:
    def __init__(self, array: list, number, string, boolean):
        self.array = array
        self.number = number
        self.string = string
        self.boolean = boolean


class ConstructorWithDefaults:
    def __init__(self, items: tuple = ("test", "test"), string="test", number=12):
        self.items = items
        self.string = string
        self.number = number


class Repository(ABC):
    @abstractmethod
    def find(self, key): ...


class Greeter(Protocol):
    def greet(self, name: str) -> str: ...


class Gamma:
    pass


class Beta:
    def __init__(self, gamma: Gamma):
        self.gamma = gamma


class Alpha:
    def __init__(self, beta: Beta):
        self.beta = beta


class Chicken:
    def __init__(self, egg: "Egg"):
        self.egg = egg


class Egg:
    def __init__(self, chicken: Chicken):
        self.chicken = chicken


class NeedsRepository:
    def __init__(self, repository: Repository):
        self.repository = repository


class Mailer:
    def __init__(self, service: Service, sender: str, *extra, retries: int = 3, **options):
        self.service = service
        self.sender = sender
        self.retries = retries


class OptionalDependency:
    def __init__(self, service: Optional[Service] = None, label: Optional[str] = None):
        self.service = service
        self.label = label


@dataclass
class Settings:
    name: str
    debug: bool = False


class App:
    def __init__(self, settings: Settings, service: Service):
        self.settings = settings
        self.service = service


class Outer:
    class Inner:
        pass


class Untyped:
    def __init__(self, required, optional="default"):
        self.required = required
        self.optional = optional
