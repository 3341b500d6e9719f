import asyncio
import signal
import sys

from swarm_quorum.coordinator import QuorumCoordinator
from swarm_quorum.env import Env, load_env
from swarm_quorum.errors import SetupError
from swarm_quorum.logging import Logger, LoggingConfig
from swarm_quorum.membership import SwarmMembershipClient
from swarm_quorum.messaging import QuorumMessenger


async def run(env: Env) -> None:
    LoggingConfig().update(
        log_level=env.QUORUM_LOG_LEVEL,
        log_output=env.QUORUM_LOG_OUTPUT,
    )

    logger = Logger()
    if env.QUORUM_LOGS_PATH:
        logger.configure(path=env.QUORUM_LOGS_PATH)

    membership = SwarmMembershipClient.from_env(env)
    messenger = QuorumMessenger.from_env(env, logger=logger)
    coordinator = QuorumCoordinator(
        env,
        membership,
        messenger,
        logger=logger,
    )

    await messenger.start()

    loop = asyncio.get_running_loop()
    for signame in ("SIGINT", "SIGTERM"):
        loop.add_signal_handler(
            getattr(signal, signame),
            coordinator.stop,
        )

    try:
        await coordinator.run()

    finally:
        await membership.close()
        await messenger.close()
        await logger.close()


def main(env_file: str | None = None) -> None:
    try:
        env = load_env(Env, env_file=env_file)
        asyncio.run(run(env))

    except SetupError as setup_error:
        print(f"swarm-quorum: {setup_error}", file=sys.stderr)
        sys.exit(1)

    except KeyboardInterrupt:
        pass
