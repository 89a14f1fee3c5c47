# pmdock/managers/daemon.py
# Daemonização: o pai espera o filho avisar (SIGUSR1) que todos os dockapps
# foram adotados; o filho vira líder de sessão e segue como o dock

import logging
import os
import signal

logger = logging.getLogger("pmdock.daemon")
logger.addHandler(logging.NullHandler())

READY_SIGNAL = signal.SIGUSR1


class DaemonError(Exception):
    pass


def daemonize(timeout=None):
    """Faz o fork e retorna, no filho, o pid do pai que está esperando.
    O pai nunca retorna: sai com 0 ao receber READY_SIGNAL, 1 no timeout.
    """
    # bloqueia antes do fork para o sinal não se perder antes do wait
    signal.pthread_sigmask(signal.SIG_BLOCK, {READY_SIGNAL})
    parent_pid = os.getpid()

    try:
        pid = os.fork()
    except OSError as e:
        raise DaemonError(f"Failed to fork: {e}") from e

    if pid > 0:
        _wait_for_child(pid, timeout)

    signal.pthread_sigmask(signal.SIG_UNBLOCK, {READY_SIGNAL})

    try:
        os.setsid()
    except OSError as e:
        raise DaemonError(f"Failed to create new session: {e}") from e

    fd = os.open(os.devnull, os.O_RDWR)
    os.dup2(fd, 0)
    if fd > 2:
        os.close(fd)

    logger.debug("Daemonized child process %d", os.getpid())
    return parent_pid


def _wait_for_child(pid, timeout):
    if timeout is None:
        signal.sigwait({READY_SIGNAL})
    elif signal.sigtimedwait({READY_SIGNAL}, timeout) is None:
        logger.error("Timed out waiting for dockapps of process %d", pid)
        os._exit(1)
    logger.debug("Exiting parent process")
    os._exit(0)


def notify_parent(parent_pid):
    try:
        os.kill(parent_pid, READY_SIGNAL)
    except ProcessLookupError:
        logger.warning("Parent process %d is gone", parent_pid)
