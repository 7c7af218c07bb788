"""Guidance shown next to findings."""

from build_audit.models.results import Remedy

_REMEDIES: dict[Remedy, str] = {
    Remedy.LICENSE: (
        "The License tag must be made of approved license abbreviations joined by "
        "'and' / 'or'. Check each license against the license database and fix the "
        "tag in the spec file."
    ),
    Remedy.LICENSEDB: (
        "The license database could not be loaded. Install the vendor data package "
        "or point 'licensedb' in the settings file at an existing database."
    ),
    Remedy.VENDOR: (
        "Set the Vendor tag to the value configured in the settings file, or set "
        "'vendor' in the settings so it can be checked."
    ),
    Remedy.BUILDHOST: (
        "Packages must be built on an approved build system. Rebuild on a host in "
        "one of the configured 'buildhost_subdomain' domains."
    ),
    Remedy.BADWORDS: (
        "Unprofessional language is not allowed in package metadata. Reword the "
        "Summary, Description or License tag."
    ),
    Remedy.KMOD_PARM: (
        "A kernel module parameter disappeared. Users passing it will get errors at "
        "module load time; restore it or document the removal."
    ),
    Remedy.KMOD_DEPS: (
        "Kernel module dependencies changed. Make sure the new dependencies ship in "
        "the same release and that nothing relied on the removed ones."
    ),
    Remedy.KMOD_ALIAS: (
        "A kernel module alias changed, so hardware or modprobe lookups that used "
        "it may no longer load the module. Confirm the change is intended."
    ),
    Remedy.UPSTREAM: (
        "Upstream sources changed without a version change. Make sure the new "
        "archive really comes from upstream, or bump the version."
    ),
}


def get_remedy_text(remedy: Remedy | str | None) -> str | None:
    """Get guidance text for a remedy key.

    Args:
        remedy: Remedy enum member or its string value

    Returns:
        Guidance text, or None for unknown or missing keys
    """
    if remedy is None:
        return None
    if isinstance(remedy, str) and not isinstance(remedy, Remedy):
        try:
            remedy = Remedy(remedy)
        except ValueError:
            return None
    return _REMEDIES.get(remedy)
