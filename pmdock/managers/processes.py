# pmdock/managers/processes.py
# Supervisão dos processos filhos: dockapps (rastreados) e launchers (fire-and-forget)

import logging
import subprocess

import psutil

logger = logging.getLogger("pmdock.processes")
logger.addHandler(logging.NullHandler())


class SpawnError(Exception):
    pass


class ProcessSupervisor:
    def __init__(self, registry):
        self.registry = registry
        # handles Popen ficam guardados: nada de reaping implícito pelo subprocess
        self.children = []

    # -------------------------
    # Spawn
    # -------------------------
    def spawn(self, command):
        """Executa `/bin/sh -c command` e retorna o pid do filho."""
        proc = subprocess.Popen(command, shell=True)
        self.children.append(proc)
        return proc.pid

    def start_dockapps(self):
        for tile in self.registry.dockapps():
            try:
                tile.pid = self.spawn(tile.command)
            except OSError as e:
                raise SpawnError(f"Failed to start {tile.command}: {e}") from e
            logger.debug("Started dockapp %s with pid %d", tile.command, tile.pid)

    def execute_launcher_command(self, tile):
        try:
            pid = self.spawn(tile.command)
        except OSError as e:
            logger.warning("Failed to execute %s: %s", tile.command, e)
            return None
        logger.debug("Launched %s with pid %d", tile.command, pid)
        return pid

    # -------------------------
    # Shutdown
    # -------------------------
    def terminate_all(self):
        logger.debug("Terminating dockapps")
        for tile in self.registry:
            if tile.pid <= 0:
                continue
            try:
                psutil.Process(tile.pid).terminate()
            except psutil.NoSuchProcess:
                logger.debug("Dockapp %s (pid %d) already gone", tile.command, tile.pid)
