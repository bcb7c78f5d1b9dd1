"""Workflow that rewrites highlighted blob URIs into SAS URLs."""
import logging
import traceback
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from ..domains.editor import OutputChannel, TextEditor, TextEditorEdit
from ..domains.errors import (
    EmptySelectionError,
    LocatorError,
    ParseError,
    SigningError,
    UserInterruptedError,
)
from ..domains.locator import parse_blob_url, parse_url
from ..domains.models import BuildResult, PendingEntry, PolicyChoice
from ..domains.policy import (
    PERMISSION_PLACEHOLDER,
    VALIDITY_PLACEHOLDER,
    Duration,
    permission_items,
    validity_items,
)
from ..domains.prompts import Prompter
from ..domains.secret_cache import SecretCache, validate_account_key
from ..domains.signing import build_signed_url, generate_sas

logger = logging.getLogger(__name__)

EMPTY_SELECTION_MESSAGE = "Please highlight one or more Azure Storage URI before running this command."
FAILURE_MESSAGE = "Failed to build SAS URL token."
SHOW_DETAILS_ACTION = "Show Details"
OUTPUT_CHANNEL_NAME = "Azure Blob"

# Per-selection failures that a multi-selection run skips over
_TOLERATED_ERRORS = (ParseError, LocatorError)


class SasSession:
    """
    State that outlives a single command run.

    Holds the account key cache; discard the session to forget every key.
    """

    def __init__(self):
        self.secrets = SecretCache()


class SasUriCommand:
    """
    Replace each highlighted storage URI with a signed SAS URL.

    Behavior:
        - Selections are processed strictly in order; each account key is asked for once
        - Validity and permissions are asked once and shared by every selection
        - All URLs of a run share one start time
        - With several selections, unparseable ones (and failed signatures) are left as they are
        - With one selection, any failure aborts the run without touching the document
        - Results are written back in a single edit transaction
    """

    def __init__(
        self,
        prompter: Prompter,
        session: Optional[SasSession] = None,
        output_channel: Optional[OutputChannel] = None,
        validity_choices: Optional[Iterable[Duration]] = None,
        clock=None,
    ):
        self.prompter = prompter
        self.session = session or SasSession()
        self.output_channel = output_channel or OutputChannel(OUTPUT_CHANNEL_NAME)
        self.validity_choices = list(validity_choices) if validity_choices else None
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def run(self, editor: TextEditor, strict: Optional[bool] = None) -> BuildResult:
        """
        Run the command against an editor's selections.

        Args:
            editor: Editor holding the document and selections
            strict: Abort on the first bad selection; defaults to True for a
                single selection and False for several

        Returns:
            BuildResult; error is set when the run failed
        """
        try:
            self._check_selections(editor)
        except EmptySelectionError as e:
            self.prompter.show_error_message(str(e))
            return BuildResult(error=e)

        ignore_errors = not strict if strict is not None else len(editor.selections) > 1

        try:
            entries = self._collect_entries(editor, ignore_errors)
            resolved = [entry for entry in entries if entry.secret]
            if not resolved:
                logger.warning("No storage URI could be resolved, nothing to sign")
                return BuildResult(skipped=len(entries))

            policy = self._prompt_policy()
            replacements = self._sign_entries(resolved, policy, ignore_errors)
            self._write_back(editor, replacements)
        except Exception as e:
            logger.debug(f"SAS URI command failed: {e}", exc_info=True)
            self._report_failure(e)
            return BuildResult(error=e)

        return BuildResult(
            rewritten=len(replacements),
            skipped=len(entries) - len(replacements),
        )

    def _check_selections(self, editor: TextEditor) -> None:
        selections = editor.selections
        if not selections or all(selection.is_empty for selection in selections):
            raise EmptySelectionError(EMPTY_SELECTION_MESSAGE)

    def _collect_entries(self, editor: TextEditor, ignore_errors: bool) -> List[PendingEntry]:
        """Parse every selection and resolve its account key, in order."""
        run_secrets: Dict[str, str] = {}
        entries = []

        for index, selection in enumerate(editor.selections, start=1):
            text = editor.document.get_text(selection)
            try:
                url = parse_url(text)
                locator = parse_blob_url(url)
            except _TOLERATED_ERRORS as e:
                if not ignore_errors:
                    raise
                logger.warning(f"Skipping selection {index}: {e}")
                entries.append(PendingEntry(selection=selection))
                continue

            secret = self._resolve_secret(locator.account_name, run_secrets)
            entries.append(PendingEntry(selection=selection, url=url, locator=locator, secret=secret))

        return entries

    def _resolve_secret(self, account_name: str, run_secrets: Dict[str, str]) -> str:
        """
        Return the key for an account, prompting only when it is unknown.

        Raises:
            UserInterruptedError: If the user dismisses the prompt
        """
        if account_name in run_secrets:
            return run_secrets[account_name]

        cached = self.session.secrets.get(account_name)
        if cached:
            logger.debug(f"Reusing cached secret for storage account '{account_name}'")
            run_secrets[account_name] = cached
            return cached

        secret = self.prompter.show_input_box(
            f'Please enter secret for storage account "{account_name}"',
            password=True,
            validate_input=validate_account_key,
        )
        if not isinstance(secret, str) or not secret:
            raise UserInterruptedError("user interrupted")

        self.session.secrets.remember(account_name, secret)
        run_secrets[account_name] = secret
        return secret

    def _prompt_policy(self) -> PolicyChoice:
        validity = self.prompter.show_quick_pick(
            validity_items(self._clock(), self.validity_choices),
            placeholder=VALIDITY_PLACEHOLDER,
        )
        if validity is None:
            raise UserInterruptedError("user interrupted")

        permission = self.prompter.show_quick_pick(
            permission_items(),
            placeholder=PERMISSION_PLACEHOLDER,
        )
        if permission is None:
            raise UserInterruptedError("user interrupted")

        logger.info(f"Using validity {validity.value} with permissions '{permission.value}'")
        return PolicyChoice(validity=validity.value, permission=permission.value)

    def _sign_entries(self, entries: List[PendingEntry], policy: PolicyChoice, ignore_errors: bool):
        # One start time for the whole batch
        now = self._clock().replace(microsecond=0)
        expiry = policy.validity.add_to(now)

        replacements = []
        for entry in entries:
            locator = entry.locator
            try:
                token = generate_sas(
                    locator.account_name,
                    entry.secret,
                    locator.container,
                    locator.blob,
                    policy.permission,
                    now,
                    expiry,
                )
            except SigningError as e:
                if not ignore_errors:
                    raise
                logger.warning(f"Skipping {locator.account_name}/{locator.container}/{locator.blob}: {e}")
                continue

            replacements.append((entry.selection, build_signed_url(entry.url, token)))

        return replacements

    def _write_back(self, editor: TextEditor, replacements) -> None:
        def apply(edit: TextEditorEdit) -> None:
            for selection, new_url in replacements:
                edit.replace(selection, new_url)

        editor.edit(apply)
        logger.info(f"Rewrote {len(replacements)} URI(s) with SAS tokens")

    def _report_failure(self, error: Exception) -> None:
        action = self.prompter.show_error_message(FAILURE_MESSAGE, SHOW_DETAILS_ACTION)
        if not action:
            return

        details = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        self.output_channel.append_line(details.rstrip())
        self.output_channel.show()
