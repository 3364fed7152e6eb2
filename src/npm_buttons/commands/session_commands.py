from npm_buttons.commands.registry import register_command


class SessionCommands:
    """The user-facing npm-buttons commands."""
    def __init__(self, session):
        self.session = session

    @register_command("npm-buttons.toggleScript", "Launch or stop a script",
                      "toggle", takes_run_key=True)
    async def toggle_script(self, key):
        return await self.session.toggle_script(key)

    @register_command("npm-buttons.resetHistory", "Forget every launched script", "reset")
    async def reset_history(self):
        await self.session.reset_history()

    @register_command("npm-buttons.deleteHistoryItem", "Forget one launched script",
                      "delete", takes_run_key=True)
    async def delete_history_item(self, key):
        return await self.session.delete_history_item(key)

    @register_command("npm-buttons.historyItemClicked", "Click a history entry (double-click toggles)",
                      "click", takes_run_key=True)
    async def history_item_clicked(self, key):
        return await self.session.history_item_clicked(key)
