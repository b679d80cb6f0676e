"""Tests for CommandRegistrar -- gating, host wiring, synopsis augmentation."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from site_commands.descriptor import CommandDescriptor, SynopsisEntry, SynopsisType
from site_commands.dispatcher import MultisiteDispatcher
from site_commands.hooks import Args, AssocArgs, CommandHooks
from site_commands.host.base import BEFORE_RUN_COMMAND
from site_commands.registrar import CommandRegistrar
from tests.helpers import RecordingSiteDirectory

NAME = SynopsisEntry(name="name", description="Who to greet")


def _registrar(
    host: MagicMock, sites: RecordingSiteDirectory, active: bool = True
) -> CommandRegistrar:
    return CommandRegistrar(host, sites, is_active=lambda: active)


class TestGating:
    def test_inactive_cli_registers_nothing(
        self, recording_sites: RecordingSiteDirectory
    ) -> None:
        host = MagicMock()
        registrar = _registrar(host, recording_sites, active=False)

        result = registrar.register(
            CommandDescriptor(path="foo"), CommandHooks(invoke=MagicMock())
        )

        assert result is None
        host.add_command.assert_not_called()
        host.add_hook.assert_not_called()
        assert registrar.commands == []

    def test_default_gate_reads_settings(
        self,
        recording_sites: RecordingSiteDirectory,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(
            "site_commands.utils.get_settings", lambda: MagicMock(cli_mode=False)
        )
        host = MagicMock()

        result = CommandRegistrar(host, recording_sites).register(
            CommandDescriptor(path="foo"), CommandHooks(invoke=MagicMock())
        )

        assert result is None
        host.add_command.assert_not_called()


class TestRegistration:
    def test_wires_command_and_hook(
        self, recording_sites: RecordingSiteDirectory
    ) -> None:
        host = MagicMock()
        descriptor = CommandDescriptor(
            path="foo bar",
            shortdesc="Short",
            longdesc="Long",
            synopsis=(NAME,),
        )

        registered = _registrar(host, recording_sites).register(
            descriptor, CommandHooks(invoke=MagicMock())
        )

        assert registered is not None
        host.add_command.assert_called_once()
        call = host.add_command.call_args
        assert call.args[0] == ("foo", "bar")
        assert isinstance(call.args[1], MultisiteDispatcher)
        controller = registered.controller
        assert call.kwargs["before_invoke"] == controller.wrapped_before_invoke
        assert call.kwargs["after_invoke"] == controller.wrapped_after_invoke
        assert call.kwargs["shortdesc"] == "Short"
        assert call.kwargs["longdesc"] == "Long"
        assert call.kwargs["synopsis"] == (NAME,)
        host.add_hook.assert_called_once_with(
            BEFORE_RUN_COMMAND, registered.controller.on_pre_run
        )

    def test_all_sites_flag_added_when_allowed(
        self, recording_sites: RecordingSiteDirectory
    ) -> None:
        host = MagicMock()
        descriptor = CommandDescriptor(
            path="foo", synopsis=(NAME,), allow_all_sites=True
        )

        registered = _registrar(host, recording_sites).register(
            descriptor, CommandHooks(invoke=MagicMock())
        )

        assert registered is not None
        synopsis = host.add_command.call_args.kwargs["synopsis"]
        assert len(synopsis) == 2
        assert synopsis[0] == NAME
        flag = synopsis[1]
        assert flag.name == "all-sites"
        assert flag.type == SynopsisType.FLAG
        assert flag.optional is True
        assert registered.descriptor.synopsis == synopsis
        # Original descriptor is untouched
        assert descriptor.synopsis == (NAME,)

    def test_all_sites_flag_absent_when_not_allowed(
        self, recording_sites: RecordingSiteDirectory
    ) -> None:
        host = MagicMock()

        _registrar(host, recording_sites).register(
            CommandDescriptor(path="foo", synopsis=(NAME,)),
            CommandHooks(invoke=MagicMock()),
        )

        assert host.add_command.call_args.kwargs["synopsis"] == (NAME,)

    def test_each_registration_gets_own_state(
        self, recording_sites: RecordingSiteDirectory
    ) -> None:
        registrar = _registrar(MagicMock(), recording_sites)
        hooks = CommandHooks(invoke=MagicMock())

        first = registrar.register(CommandDescriptor(path="one"), hooks)
        second = registrar.register(CommandDescriptor(path="two"), hooks)

        assert first is not None and second is not None
        assert first.state is not second.state
        assert [c.descriptor.name for c in registrar.commands] == ["one", "two"]

    def test_accepts_command_object(
        self, recording_sites: RecordingSiteDirectory
    ) -> None:
        calls: list[Args] = []

        class Greet:
            def invoke(self, args: Args, assoc_args: AssocArgs) -> None:
                calls.append(args)

        host = MagicMock()
        registrar = _registrar(host, recording_sites)
        registrar.register(CommandDescriptor(path="greet"), Greet())

        dispatcher = host.add_command.call_args.args[1]
        dispatcher(["x"], {})
        assert calls == [["x"]]

    def test_object_without_invoke_is_rejected(
        self, recording_sites: RecordingSiteDirectory
    ) -> None:
        with pytest.raises(TypeError, match="invoke"):
            _registrar(MagicMock(), recording_sites).register(
                CommandDescriptor(path="broken"), object()
            )
