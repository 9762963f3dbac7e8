"""Fixed repository layout for cloud builds."""

GITHUB_API_URL = "https://api.github.com"

MANIFEST_PATH = "Package.swift"
SOURCE_PATH = "main.swift"
WORKFLOW_FILE = "build.yml"
WORKFLOW_REF = "main"

EXECUTABLE_TARGET = "SwiftIDE"

MANIFEST_TEMPLATE = """\
// swift-tools-version: 5.9
import PackageDescription

let package = Package(
    name: "{target}",
    platforms: [.iOS(.v16)],
    products: [
        .executable(name: "{target}", targets: ["{target}"])
    ],
    targets: [
        .executableTarget(
            name: "{target}",
            path: ".",
            sources: ["{source}"]
        )
    ]
)
"""


def render_manifest() -> str:
    """Render the package descriptor for the executable target."""
    return MANIFEST_TEMPLATE.format(target=EXECUTABLE_TARGET, source=SOURCE_PATH)


def commit_message(path: str) -> str:
    return f"Update {path} via swiftdeploy"
