"""Named tasks invokable from the command line."""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence, Tuple

from loguru import logger

from .compiler import compile_contracts
from .constants import ETH_STREAMER_CONTRACT
from .runtime import RuntimeEnvironment

TaskAction = Callable[..., Any]


@dataclass
class Task:
    """A named action run against a RuntimeEnvironment."""

    name: str
    description: str
    action: TaskAction
    # argparse add_argument() calls: (flags, kwargs)
    params: List[Tuple[Tuple[str, ...], Dict[str, Any]]] = field(default_factory=list)

    def run(self, env: RuntimeEnvironment, **kwargs: Any) -> Any:
        logger.debug(f"Running task {self.name}")
        return self.action(env, **kwargs)


_TASKS: Dict[str, Task] = {}


def param(*flags: str, **kwargs: Any) -> Callable[[TaskAction], TaskAction]:
    """Declare a task option using argparse add_argument() arguments."""

    def decorator(action: TaskAction) -> TaskAction:
        params = getattr(action, "__task_params__", [])
        # Decorators apply bottom-up; keep declaration order
        action.__task_params__ = [(flags, kwargs)] + params
        return action

    return decorator


def task(name: str, description: str) -> Callable[[TaskAction], TaskAction]:
    """Register a function as a named task."""

    def decorator(action: TaskAction) -> TaskAction:
        if name in _TASKS:
            raise ValueError(f"Task '{name}' is already defined")
        _TASKS[name] = Task(
            name=name,
            description=description,
            action=action,
            params=list(getattr(action, "__task_params__", [])),
        )
        return action

    return decorator


def get_task(name: str) -> Task:
    """
    Look up a registered task.

    Raises:
        KeyError: If no task has that name
    """
    return _TASKS[name]


def list_tasks() -> List[Task]:
    """Return registered tasks sorted by name."""
    return [_TASKS[name] for name in sorted(_TASKS)]


@task("compile", "Compiles the Solidity sources into artifacts")
def compile_task(env: RuntimeEnvironment) -> int:
    written = compile_contracts(env.config)
    return len(written)


@task("deploy-eth-streamer", "Deploys the EthStreamer contract")
@param(
    "--arg",
    dest="constructor_args",
    action="append",
    default=[],
    metavar="VALUE",
    help="constructor argument, repeat for each parameter (none by default)",
)
def deploy_eth_streamer(env: RuntimeEnvironment, constructor_args: Sequence[Any] = ()) -> str:
    """
    Deploy EthStreamer from the first signer and print its address.

    Each run deploys a new instance. Any failure aborts the task.

    Args:
        env: Runtime environment for the selected network
        constructor_args: Constructor arguments, checked against the compiled ABI

    Returns:
        Checksummed address of the deployed contract
    """
    deployer = env.get_signers()[0]
    print("Deploying contracts with:", deployer.address)

    factory = env.get_contract_factory(ETH_STREAMER_CONTRACT, deployer)
    streamer = factory.deploy(*constructor_args)
    streamer.wait_for_deployment()

    address = streamer.get_address()
    print(f"{ETH_STREAMER_CONTRACT} deployed at:", address)
    return address
